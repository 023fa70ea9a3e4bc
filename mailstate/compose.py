"""Compose sessions: one in-progress message from opening to send/draft/cancel.

A session starts from exactly one source (blank, a saved draft, or a reply
derived from an existing email), tracks recipient validity on every edit, and
ends in one of the terminal states SENT, DRAFTED or CANCELLED.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable

from mailstate.addresses import normalize_address_list, split_address_list, validate_address_list
from mailstate.email import Email, Folder
from mailstate.errors import RemoteError, SessionClosedError
from mailstate.fields import RECIPIENT_FIELDS, ComposeField, ComposeFields
from mailstate.folder_store import AddEmail, FolderState, FolderStore
from mailstate.ids import generate_message_id
from mailstate.mail_store import ErrorReporter, MailStore
from mailstate.prefill import ReplyMode, derive_prefill

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send email."
DRAFT_FAILED_MESSAGE = "Failed to save draft."


class ComposeStatus(str, Enum):
    """Lifecycle of a compose session."""

    EMPTY = "empty"
    EDITING = "editing"
    SENT = "sent"
    DRAFTED = "drafted"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the session is closed."""
        return self in (ComposeStatus.SENT, ComposeStatus.DRAFTED, ComposeStatus.CANCELLED)


class ComposeSession:
    """State and actions of one message being composed.

    Use the ``blank``, ``from_draft`` and ``from_reply`` constructors rather
    than calling the class directly.

    Attributes:
        from_address: The sender identity attached to the session.
        draft_id: Id of the draft this session overwrites, if any.
        status: Current lifecycle status.
        invalid_entries: Invalid address tokens per recipient field.
        backend_error: Message of the last failed send, if any.
    """

    def __init__(
        self,
        mail_store: MailStore,
        store: FolderStore,
        from_address: str | None,
        fields: ComposeFields | None = None,
        draft_id: str | None = None,
        on_error: ErrorReporter | None = None,
        id_factory: Callable[[], str] = generate_message_id,
    ) -> None:
        """Initialize the session.

        Args:
            mail_store: Remote mail store used to send and save drafts.
            store: The session's FolderStore; receives sent emails.
            from_address: Sender identity, or None if no identity is known.
            fields: Prefilled field values (None for a blank session).
            draft_id: Id of the draft being resumed.
            on_error: Receives non-fatal error messages for display.
            id_factory: Generates ids for new messages and drafts.
        """
        self._mail_store = mail_store
        self._store = store
        self._on_error = on_error
        self._id_factory = id_factory
        self.from_address = from_address
        self.draft_id = draft_id
        self.status = ComposeStatus.EMPTY if fields is None else ComposeStatus.EDITING
        self.backend_error: str | None = None
        self._fields = fields or ComposeFields()
        self.invalid_entries: dict[ComposeField, list[str]] = {}
        self._validate_recipients()

    @classmethod
    def blank(
        cls,
        mail_store: MailStore,
        store: FolderStore,
        from_address: str | None,
        **kwargs,
    ) -> "ComposeSession":
        """Open an empty session for a new message."""
        return cls(mail_store, store, from_address, **kwargs)

    @classmethod
    def from_draft(
        cls,
        mail_store: MailStore,
        store: FolderStore,
        from_address: str | None,
        drafts: FolderState,
        draft_id: str,
        **kwargs,
    ) -> "ComposeSession":
        """Resume a draft from the drafts folder's loaded emails.

        If the draft is not loaded, a blank session without a draft id is
        returned so that saving cannot overwrite the unseen draft.

        Args:
            mail_store: Remote mail store.
            store: The session's FolderStore.
            from_address: Sender identity.
            drafts: Current state of the drafts folder.
            draft_id: Id of the draft to resume.
            **kwargs: Extra keyword arguments for the constructor.

        Returns:
            The resumed (or blank) session.
        """
        draft = drafts.find(draft_id)
        if draft is None:
            logger.warning("Draft %s is not loaded, opening a blank compose", draft_id)
            return cls(mail_store, store, from_address, **kwargs)

        fields = ComposeFields(
            to=draft.to,
            cc=draft.cc,
            bcc=draft.bcc,
            subject=draft.subject,
            body=draft.body,
        )
        return cls(mail_store, store, from_address, fields=fields, draft_id=draft.id, **kwargs)

    @classmethod
    def from_reply(
        cls,
        mail_store: MailStore,
        store: FolderStore,
        from_address: str,
        source: Email,
        mode: ReplyMode,
        **kwargs,
    ) -> "ComposeSession":
        """Open a reply, reply-all or forward of an existing email."""
        fields = derive_prefill(source, mode, from_address)
        return cls(mail_store, store, from_address, fields=fields, **kwargs)

    @property
    def fields(self) -> ComposeFields:
        """Current field values."""
        return self._fields

    @property
    def can_submit(self) -> bool:
        """True if no recipient field contains an invalid address."""
        return not any(self.invalid_entries.values())

    @property
    def can_send(self) -> bool:
        """True if the message can be sent right now.

        Requires valid recipients, at least one ``to`` address, a sender
        identity, and an open session.
        """
        return (
            not self.status.is_terminal
            and self.can_submit
            and bool(split_address_list(self._fields.to))
            and bool(self.from_address)
        )

    def edit_field(self, field: ComposeField, value: str) -> None:
        """Change one field and re-validate recipients if needed.

        Args:
            field: The field to change.
            value: The new raw value.

        Raises:
            SessionClosedError: If the session is closed.
        """
        self._ensure_open()
        field = ComposeField(field)
        self._fields = self._fields.model_copy(update={field.value: value})
        self.status = ComposeStatus.EDITING
        if field.is_recipient:
            self._validate_recipients()

    async def submit_send(self) -> bool:
        """Send the message.

        On success the stored email is appended to the sent folder and the
        session closes with its fields reset. On failure the session stays
        open with its fields intact and ``backend_error`` set.

        Returns:
            True if the message was sent.

        Raises:
            SessionClosedError: If the session is closed.
        """
        self._ensure_open()
        if not self.can_send:
            logger.info("Send blocked: recipients invalid, missing, or no sender identity")
            return False

        email = self._build_email(self._id_factory())
        try:
            saved = await self._mail_store.send(email)
        except RemoteError as e:
            logger.warning("Failed to send email %s: %s", email.id, e)
            self.backend_error = e.message or SEND_FAILED_MESSAGE
            return False

        self._store.dispatch(AddEmail(folder=Folder.SENT, email=saved))
        logger.info("Sent email %s", saved.id)
        self._fields = ComposeFields()
        self._validate_recipients()
        self.backend_error = None
        self.status = ComposeStatus.SENT
        return True

    def submit_draft(self) -> "asyncio.Task[bool]":
        """Save the message as a draft and close the session.

        The session closes immediately; the save runs in the background. A
        new draft adopts a freshly generated id, which stays its identity for
        later saves. Save failures are logged and reported, never raised.

        Returns:
            The task performing the save; resolves to True on success.

        Raises:
            SessionClosedError: If the session is closed.
        """
        self._ensure_open()
        if self.draft_id is None:
            self.draft_id = self._id_factory()
        draft = self._build_email(self.draft_id)
        self.status = ComposeStatus.DRAFTED
        return asyncio.get_running_loop().create_task(self._save_draft(draft))

    def cancel(self) -> None:
        """Discard the session without side effects."""
        self._ensure_open()
        self.status = ComposeStatus.CANCELLED

    async def _save_draft(self, draft: Email) -> bool:
        try:
            await self._mail_store.save_draft(draft)
        except RemoteError as e:
            logger.warning("Failed to save draft %s: %s", draft.id, e)
            self._report(f"{DRAFT_FAILED_MESSAGE} {e.message}".strip())
            return False
        logger.info("Saved draft %s", draft.id)
        return True

    def _build_email(self, email_id: str) -> Email:
        fields = self._fields
        recipients = {
            field.value: normalize_address_list(fields.get(field)) for field in RECIPIENT_FIELDS
        }
        return Email(
            id=email_id,
            from_address=self.from_address or "",
            subject=fields.subject,
            body=fields.body,
            **recipients,
        )

    def _validate_recipients(self) -> None:
        self.invalid_entries = {
            field: validate_address_list(self._fields.get(field)).invalid_tokens
            for field in RECIPIENT_FIELDS
        }

    def _ensure_open(self) -> None:
        if self.status.is_terminal:
            raise SessionClosedError(self.status.value)

    def _report(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)
