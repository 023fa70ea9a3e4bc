"""Mail store API client for the webmail client.

Provides an async client for the remote mail store, the identity provider
that reads the signed-in user's address from the stored credential, and
environment-based configuration.

Example:
    async with AsyncWebmailClient(base_url="http://localhost:5000/api", token=token) as client:
        page = await client.mailbox.fetch_page("inbox", page=1, page_size=10)

Exports:
    AsyncWebmailClient: Asynchronous client for the mail store API.
    AsyncMailboxClient: The /emails/* sub-client (implements MailStore).
    IdentityProvider: Resolves the viewer's address from a JWT.
    ClientSettings: Settings loaded from the environment.

    Exceptions (all subclasses of mailstate.RemoteError):
        ConnectionError, TimeoutError, APIError, AuthenticationError,
        ValidationError, NotFoundError, ConflictError, ServerError,
        InvalidResponseError.
"""

from mailclient._identity import IdentityProvider
from mailclient._mailbox import AsyncMailboxClient
from mailclient.client import AsyncWebmailClient
from mailclient.config import ClientSettings
from mailclient.exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    ConnectionError,
    InvalidResponseError,
    NotFoundError,
    RemoteError,
    ServerError,
    TimeoutError,
    ValidationError,
)

__all__ = [
    "APIError",
    "AsyncMailboxClient",
    "AsyncWebmailClient",
    "AuthenticationError",
    "ClientSettings",
    "ConflictError",
    "ConnectionError",
    "IdentityProvider",
    "InvalidResponseError",
    "NotFoundError",
    "RemoteError",
    "ServerError",
    "TimeoutError",
    "ValidationError",
]
