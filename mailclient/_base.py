"""Base class for mail store sub-clients.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mailclient._http import AsyncHTTPClient


class AsyncBaseClient:
    """Base class for asynchronous sub-clients.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        """Initialize the sub-client.

        Args:
            http_client: The shared async HTTP client instance.
        """
        self._http = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make an async GET request against the mail store.

        Args:
            path: The URL path, relative to the API base URL.
            params: Query parameters.

        Returns:
            The parsed JSON response, or None for an empty body.
        """
        return await self._http.get(path, params=params)

    async def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async POST request against the mail store.

        Args:
            path: The URL path, relative to the API base URL.
            json: JSON body to send.
            params: Query parameters.

        Returns:
            The parsed JSON response, or None for an empty body.
        """
        return await self._http.post(path, json=json, params=params)
