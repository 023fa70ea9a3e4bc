"""Main webmail client.

``AsyncWebmailClient`` bundles the mail store API and the identity provider
behind one object that owns the HTTP connection.

Example:
    Opening the starred folder::

        from mailclient import AsyncWebmailClient, ClientSettings
        from mailstate import Folder, FolderScreen, FolderStore

        async with AsyncWebmailClient.from_settings(ClientSettings.from_env()) as client:
            store = FolderStore()
            screen = FolderScreen(
                Folder.STARRED, store, client.mailbox, client.identity.current_address()
            )
            await screen.load_page(1)
"""

from typing import Any

from mailclient._http import AsyncHTTPClient
from mailclient._identity import IdentityProvider
from mailclient._mailbox import AsyncMailboxClient
from mailclient.config import ClientSettings


class AsyncWebmailClient:
    """Asynchronous client for the mail store API.

    Attributes:
        base_url: The base URL of the mail store API.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        token: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the mail store API.
            token: Stored credential of the signed-in user.
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Whether to retry connection errors, timeouts and
                HTTP 502/503/504 with exponential backoff (default: False).
            max_retries: Maximum retry attempts when retry is enabled.
            transport: Custom HTTP transport (e.g., ASGITransport for testing).
        """
        self.base_url = base_url
        self.timeout = timeout
        self._http = AsyncHTTPClient(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self._identity = IdentityProvider(token)
        self._mailbox: AsyncMailboxClient | None = None

    @classmethod
    def from_settings(cls, settings: ClientSettings, transport: Any = None) -> "AsyncWebmailClient":
        """Create a client from loaded settings."""
        return cls(
            base_url=settings.base_url,
            token=settings.token_value,
            timeout=settings.timeout,
            retry_enabled=settings.retry_enabled,
            max_retries=settings.max_retries,
            transport=transport,
        )

    async def __aenter__(self) -> "AsyncWebmailClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager and close the client."""
        await self.close()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._http.close()

    @property
    def mailbox(self) -> AsyncMailboxClient:
        """Access the mailbox endpoints (/emails/*)."""
        if self._mailbox is None:
            self._mailbox = AsyncMailboxClient(self._http)
        return self._mailbox

    @property
    def identity(self) -> IdentityProvider:
        """Resolve the signed-in user's address."""
        return self._identity
