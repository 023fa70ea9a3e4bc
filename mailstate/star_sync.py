"""Star toggling kept consistent with the remote mail store.

The remote toggle is confirmed before the local state changes, so the UI never
shows a starred state the server rejected.
"""

import logging

from mailstate.email import Folder
from mailstate.errors import RemoteError
from mailstate.folder_store import FolderStore, ToggleStar
from mailstate.mail_store import ErrorReporter, MailStore

logger = logging.getLogger(__name__)

STAR_FAILED_MESSAGE = "Failed to toggle star status."


class StarSyncCoordinator:
    """Confirm-then-apply star toggles.

    Attributes:
        last_error: Message of the most recent failed toggle, if any.
    """

    def __init__(
        self,
        store: FolderStore,
        mail_store: MailStore,
        on_error: ErrorReporter | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: The session's FolderStore.
            mail_store: Remote mail store.
            on_error: Receives non-fatal error messages for display.
        """
        self._store = store
        self._mail_store = mail_store
        self._on_error = on_error
        self.last_error: str | None = None

    async def toggle(self, folder: Folder | str, email_id: str) -> bool:
        """Toggle the star of an email remotely, then locally.

        Failures leave the local state untouched and are not retried.

        Args:
            folder: Folder whose loaded page holds the email.
            email_id: Id of the email to toggle.

        Returns:
            True if the toggle was confirmed and applied.
        """
        folder = Folder(folder)
        try:
            await self._mail_store.toggle_star(email_id)
        except RemoteError as e:
            logger.warning("Failed to toggle star of %s in %s: %s", email_id, folder.value, e)
            self.last_error = f"{STAR_FAILED_MESSAGE} {e.message}".strip()
            if self._on_error is not None:
                self._on_error(self.last_error)
            return False

        self.last_error = None
        self._store.dispatch(ToggleStar(folder=folder, email_id=email_id))
        return True
