"""Internal async HTTP layer of the mail store client.

Wraps ``httpx.AsyncClient`` with:
- bearer-token authentication
- mapping of error responses to the RemoteError hierarchy
- optional retry with exponential backoff on transient failures

This is an internal module and should not be imported directly by users.
"""

import asyncio
import logging
from typing import Any, Literal

import httpx

from mailclient.exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    ConnectionError,
    InvalidResponseError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Status codes that trigger automatic retry (when retry is enabled)
RETRYABLE_STATUS_CODES = {502, 503, 504}

DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None]:
    """Extract a display message and error type from an error response.

    The mail store reports errors as ``{"msg": "..."}``; ``message``,
    ``error`` and ``detail`` keys are accepted as well. Falls back to the raw
    response text.

    Args:
        response: The HTTP response to parse.

    Returns:
        A tuple of (message, error_type).
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return (text or f"HTTP {response.status_code} error"), None

    if isinstance(body, dict):
        for key in ("msg", "message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value, body.get("type")
    return str(body), None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the RemoteError subclass matching an error status code.

    Args:
        response: The HTTP response to check.

    Raises:
        AuthenticationError: For HTTP 401/403 responses.
        ValidationError: For HTTP 422 responses.
        NotFoundError: For HTTP 404 responses.
        ConflictError: For HTTP 409 responses.
        ServerError: For HTTP 5xx responses.
        APIError: For other HTTP 4xx responses.
    """
    if response.is_success:
        return

    message, error_type = _parse_error_response(response)
    status_code = response.status_code
    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    if status_code in (401, 403):
        raise AuthenticationError(message, status_code=status_code, response_body=response_body)
    if status_code == 422:
        raise ValidationError(message, response_body=response_body)
    if status_code == 404:
        raise NotFoundError(message, response_body=response_body)
    if status_code == 409:
        raise ConflictError(message, response_body=response_body)
    if status_code >= 500:
        raise ServerError(message, status_code=status_code, response_body=response_body)
    raise APIError(
        message=message,
        status_code=status_code,
        error_type=error_type,
        response_body=response_body,
    )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Exponential backoff delay (base * 2^attempt), capped at the maximum.

    Args:
        attempt: The retry attempt number (0-indexed).
        base: Base delay in seconds.

    Returns:
        The delay in seconds before the next retry.
    """
    return min(base * (2 ** attempt), DEFAULT_RETRY_BACKOFF_MAX)


class AsyncHTTPClient:
    """Asynchronous HTTP client for mail store requests.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            base_url: The base URL for all API requests.
            token: Credential sent as ``Authorization: Bearer <token>``.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry on transient failures.
            max_retries: Maximum number of retry attempts.
            transport: Custom transport (e.g., ASGITransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        headers = {"Authorization": f"Bearer {token}"} if token else None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager and close client."""
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make a request and return the parsed JSON response.

        Args:
            method: The HTTP method (GET, POST, etc.).
            path: The URL path (appended to base_url).
            params: Query parameters; None values are dropped.
            json: JSON body to send with the request.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            ConnectionError: If the connection fails or drops.
            TimeoutError: If the request times out.
            APIError: If the mail store returns an error response.
            InvalidResponseError: If a successful response is not JSON.
        """
        url = f"{self.base_url}{path}"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        attempts = self.max_retries + 1 if self.retry_enabled else 1

        for attempt in range(attempts):
            is_last = attempt >= attempts - 1
            try:
                response = await self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                )
            except httpx.ConnectError as e:
                if is_last:
                    raise ConnectionError(f"Failed to connect to {url}", url=url, cause=e) from e
                logger.warning("Connection to %s failed, retrying (attempt %d)", url, attempt + 1)
            except httpx.TimeoutException as e:
                if is_last:
                    raise TimeoutError(
                        f"Request to {url} timed out", timeout=self.timeout, url=url
                    ) from e
                logger.warning("Request to %s timed out, retrying (attempt %d)", url, attempt + 1)
            except httpx.TransportError as e:
                # Dropped connections, protocol errors and other transport failures
                if is_last:
                    raise ConnectionError(
                        f"Connection to {url} failed: {e}", url=url, cause=e
                    ) from e
                logger.warning(
                    "Transport error on %s (%s), retrying (attempt %d)", url, e, attempt + 1
                )
            else:
                if response.status_code in RETRYABLE_STATUS_CODES and self.retry_enabled and not is_last:
                    logger.warning(
                        "%s %s returned %d, retrying (attempt %d)",
                        method,
                        path,
                        response.status_code,
                        attempt + 1,
                    )
                else:
                    _raise_for_status(response)
                    if response.content:
                        try:
                            return response.json()
                        except ValueError as e:
                            raise InvalidResponseError(
                                f"Mail store returned a non-JSON response for {method} {path}",
                                status_code=response.status_code,
                                response_body=response.text,
                            ) from e
                    return None

            await asyncio.sleep(_calculate_backoff(attempt))

        raise RuntimeError("Unexpected error in request retry loop")

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make an async GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async POST request."""
        return await self.request("POST", path, params=params, json=json)
