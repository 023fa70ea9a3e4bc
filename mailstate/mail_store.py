"""Interface of the remote mail store used by the state core."""

from typing import Callable, Protocol

from mailstate.email import Email, Folder, FolderPage

# Receives user-visible, non-fatal error messages (e.g. to show as a toast)
ErrorReporter = Callable[[str], None]


class MailStore(Protocol):
    """Asynchronous mail store operations.

    Implementations raise ``mailstate.errors.RemoteError`` (or a subclass)
    when a call fails.
    """

    async def fetch_page(self, folder: Folder, page: int, page_size: int) -> FolderPage:
        """Fetch one page of a folder."""
        ...

    async def send(self, email: Email) -> Email:
        """Send an email and return the stored copy."""
        ...

    async def save_draft(self, email: Email) -> None:
        """Create or overwrite the draft with the email's id."""
        ...

    async def toggle_star(self, email_id: str) -> None:
        """Flip the starred flag of an email."""
        ...
