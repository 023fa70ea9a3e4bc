"""Per-folder screen coordinator.

Ties one folder's view together: paging through the mail store, selection,
opening compose/draft/reply sessions, and star toggles. Rendering is left to
the caller, which reads ``emails``, ``selected_email``, ``page_count`` and
``notices``.
"""

import logging

from mailstate.compose import ComposeSession
from mailstate.email import Email, Folder
from mailstate.errors import RemoteError
from mailstate.folder_store import FolderState, FolderStore, ReplyEmail, SelectEmail, SetEmails
from mailstate.mail_store import MailStore
from mailstate.prefill import ReplyMode
from mailstate.star_sync import StarSyncCoordinator

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load emails."


class FolderScreen:
    """Coordinates one folder of the mailbox.

    Attributes:
        folder: The folder this screen shows.
        notices: User-visible, non-fatal messages, oldest first.
    """

    def __init__(
        self,
        folder: Folder | str,
        store: FolderStore,
        mail_store: MailStore,
        viewer_address: str | None,
    ) -> None:
        """Initialize the screen.

        Args:
            folder: The folder to show.
            store: The session's FolderStore.
            mail_store: Remote mail store.
            viewer_address: The signed-in user's address, or None if the
                identity could not be resolved (composition is blocked).
        """
        self.folder = Folder(folder)
        self._store = store
        self._mail_store = mail_store
        self._viewer_address = viewer_address
        self.notices: list[str] = []
        self._stars = StarSyncCoordinator(store, mail_store, on_error=self.notices.append)

    @property
    def state(self) -> FolderState:
        """Current state of this screen's folder."""
        return self._store.folder(self.folder)

    @property
    def emails(self) -> tuple[Email, ...]:
        """Emails on the loaded page."""
        return self.state.emails

    @property
    def selected_email(self) -> Email | None:
        """The selected email, if any."""
        return self.state.selected_email

    @property
    def page_count(self) -> int:
        """Number of pages the folder spans."""
        return self.state.page_count

    async def load_page(self, page: int) -> bool:
        """Fetch a page and show it, unless a newer fetch was started meanwhile.

        The page number, emails and total change together, only when the
        newest fetch succeeds; a failed or superseded fetch leaves the folder
        as it was.

        Args:
            page: 1-based page number.

        Returns:
            True if the fetched page was applied.

        Raises:
            ValueError: If page is below 1.
        """
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        token = self._store.issue_fetch_token(self.folder)
        try:
            result = await self._mail_store.fetch_page(self.folder, page, self.state.page_size)
        except RemoteError as e:
            logger.warning("Failed to load page %d of %s: %s", page, self.folder.value, e)
            if self._store.is_latest_fetch(self.folder, token):
                self.notices.append(LOAD_FAILED_MESSAGE)
            return False

        if not self._store.is_latest_fetch(self.folder, token):
            logger.debug("Dropping stale page %d of %s", page, self.folder.value)
            return False

        self._store.dispatch(
            SetEmails(
                folder=self.folder,
                emails=result.emails,
                total_count=result.total_count,
                page=page,
            )
        )
        return True

    def select(self, email_id: str | None) -> Email | None:
        """Select an email on the loaded page (None clears the selection)."""
        self._store.dispatch(SelectEmail(folder=self.folder, email_id=email_id))
        return self.selected_email

    async def toggle_star(self, email_id: str) -> bool:
        """Toggle the star of an email on this folder."""
        return await self._stars.toggle(self.folder, email_id)

    def open_compose(self) -> ComposeSession | None:
        """Open a blank compose session."""
        if not self._has_identity():
            return None
        return ComposeSession.blank(
            self._mail_store, self._store, self._viewer_address, on_error=self.notices.append
        )

    def open_draft(self, draft_id: str) -> ComposeSession | None:
        """Resume a draft loaded in the drafts folder."""
        if not self._has_identity():
            return None
        return ComposeSession.from_draft(
            self._mail_store,
            self._store,
            self._viewer_address,
            drafts=self._store.folder(Folder.DRAFTS),
            draft_id=draft_id,
            on_error=self.notices.append,
        )

    def open_reply(self, mode: ReplyMode) -> ComposeSession | None:
        """Open a reply, reply-all or forward of the selected email."""
        source = self.selected_email
        if source is None:
            logger.warning("No email selected in %s, cannot open %s", self.folder.value, mode)
            return None
        if not self._has_identity():
            return None

        mode = ReplyMode(mode)
        self._store.dispatch(ReplyEmail(folder=self.folder, mode=mode, email=source))
        return ComposeSession.from_reply(
            self._mail_store,
            self._store,
            self._viewer_address,
            source=source,
            mode=mode,
            on_error=self.notices.append,
        )

    def _has_identity(self) -> bool:
        if self._viewer_address:
            return True
        logger.warning("No signed-in identity, composition is blocked")
        self.notices.append("Sign in to compose email.")
        return False
