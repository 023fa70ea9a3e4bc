"""Exceptions of the mail state core.

RemoteError is the base of every mail store failure; callers catch it and turn
it into a user-visible message. Malformed recipients and missing drafts or
selections are reported as values, not exceptions. ProgrammingError and its
subclasses signal caller bugs and are meant to fail loudly.

Exception Hierarchy:
    RemoteError - A mail store call failed (recoverable; subclassed by mailclient)
    ProgrammingError (base)
    ├── UnknownActionError - Action outside the closed FolderStore set
    └── SessionClosedError - Action on a sent/drafted/cancelled ComposeSession
"""

from typing import Any


class RemoteError(Exception):
    """A call to the remote mail store failed.

    Remote errors are recoverable: they are reported to the user and never
    leave local state half-updated.

    Attributes:
        message: Human-readable error description, suitable for display.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class ProgrammingError(RuntimeError):
    """Base class for errors that indicate a bug in the caller.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class UnknownActionError(ProgrammingError):
    """An action that the FolderStore does not recognize was dispatched.

    Attributes:
        action: The offending action object.
    """

    def __init__(self, action: Any) -> None:
        """Initialize the exception.

        Args:
            action: The unrecognized action.
        """
        self.action = action
        super().__init__(f"Unknown folder store action: {type(action).__name__}")


class SessionClosedError(ProgrammingError):
    """A ComposeSession was used after reaching a terminal state.

    Attributes:
        status: The terminal status the session is in.
    """

    def __init__(self, status: str) -> None:
        """Initialize the exception.

        Args:
            status: The terminal status the session is in.
        """
        self.status = status
        super().__init__(f"Compose session is closed (status: {status})")
