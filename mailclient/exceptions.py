"""Exception hierarchy for the mail store client.

Every failure of a mail store call is a ``RemoteError`` so that the state
core can catch it without knowing about HTTP.

Exception Hierarchy:
    RemoteError (base, from mailstate.errors)
    ├── ConnectionError - Mail store unreachable
    ├── TimeoutError - Request timeout
    └── APIError - Mail store returned an error response
        ├── AuthenticationError (HTTP 401/403)
        ├── ValidationError (HTTP 422)
        ├── NotFoundError (HTTP 404)
        ├── ConflictError (HTTP 409)
        ├── ServerError (HTTP 5xx)
        └── InvalidResponseError - Malformed success payload

Example:
    Reporting a failed send::

        try:
            await client.mailbox.send(email)
        except APIError as e:
            print(f"Mail store error {e.status_code}: {e.message}")
        except RemoteError as e:
            print(f"Could not reach the mail store: {e}")
"""

from typing import Any

from mailstate.errors import RemoteError


class ConnectionError(RemoteError):
    """Failed to connect to the mail store.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed to connect.
        cause: The underlying exception that caused the connection failure.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            url: The URL that failed to connect.
            cause: The underlying exception that caused the failure.
        """
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including URL if available."""
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class TimeoutError(RemoteError):
    """A mail store request took longer than the configured timeout.

    Attributes:
        message: Human-readable error description.
        timeout: The timeout value in seconds.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            timeout: The timeout value in seconds.
            url: The URL that timed out.
        """
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including timeout if available."""
        if self.timeout is not None:
            return f"{self.message} (timeout: {self.timeout}s)"
        return self.message


class APIError(RemoteError):
    """The mail store answered with an HTTP error status.

    Attributes:
        message: Error message from the response body (``msg`` when present).
        status_code: HTTP status code.
        error_type: Error type/code from the response body (if available).
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            status_code: HTTP status code.
            error_type: Error type/code from the response body.
            response_body: Raw response body for debugging.
        """
        self.status_code = status_code
        self.error_type = error_type
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including status code."""
        return f"[HTTP {self.status_code}] {self.message}"


class AuthenticationError(APIError):
    """The credential was missing, expired or rejected (HTTP 401/403)."""

    def __init__(self, message: str, status_code: int = 401, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            status_code: 401 or 403.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="authentication_error",
            response_body=response_body,
        )


class ValidationError(APIError):
    """The mail store rejected the request payload (HTTP 422)."""

    def __init__(self, message: str, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=422,
            error_type="validation_error",
            response_body=response_body,
        )


class NotFoundError(APIError):
    """The folder or message does not exist (HTTP 404)."""

    def __init__(self, message: str, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=404,
            error_type="not_found",
            response_body=response_body,
        )


class ConflictError(APIError):
    """The request conflicts with stored state (HTTP 409).

    For example, sending a message whose id is already taken.
    """

    def __init__(self, message: str, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=409,
            error_type="conflict",
            response_body=response_body,
        )


class ServerError(APIError):
    """Mail store internal error (HTTP 5xx).

    When retry is enabled, 502/503/504 responses are retried before this is
    raised.
    """

    def __init__(self, message: str, status_code: int = 500, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the response.
            status_code: The specific 5xx status code (default: 500).
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="server_error",
            response_body=response_body,
        )


class InvalidResponseError(APIError):
    """A successful response could not be read as the expected payload.

    Raised for bodies that are not JSON or do not match the expected shape,
    such as a folder page whose emails lack an id.
    """

    def __init__(self, message: str, status_code: int = 200, response_body: Any = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of what was wrong with the response.
            status_code: Status code of the offending response.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="invalid_response",
            response_body=response_body,
        )
