"""Folder-scoped mailbox state and its transition function.

The mailbox state is immutable: ``apply_action`` never mutates its input and
returns a new ``MailboxState`` for every recognized action. ``FolderStore``
owns the current state for one user session and funnels every write through
``apply_action``.

Invariant: a folder's ``selected_email``, if set, is always one of the
elements of that folder's ``emails``.
"""

import logging
import math
from collections import deque
from typing import Annotated, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mailstate.email import Email, Folder
from mailstate.errors import UnknownActionError
from mailstate.prefill import ReplyMode

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

# Number of recently dispatched actions kept on the store
ACTION_LOG_SIZE = 200


class FolderState(BaseModel):
    """The loaded page, selection and counts of one folder.

    Args:
        emails: Emails on the loaded page, in server order.
        selected_email: The selected email (one of ``emails``) or None.
        page: Current 1-based page number.
        page_size: Emails per page.
        total_count: Server-reported number of emails in the folder.
    """

    model_config = ConfigDict(frozen=True)

    emails: tuple[Email, ...] = Field(default=(), description="Emails on the loaded page")
    selected_email: Email | None = Field(default=None, description="Selected email")
    page: int = Field(default=1, ge=1, description="Current 1-based page")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Emails per page")
    total_count: int = Field(default=0, ge=0, description="Server-reported folder total")

    @property
    def page_count(self) -> int:
        """Number of pages the folder spans."""
        return math.ceil(self.total_count / self.page_size)

    def find(self, email_id: str) -> Email | None:
        """Return the loaded email with the given id, if any."""
        for email in self.emails:
            if email.id == email_id:
                return email
        return None


class MailboxState(BaseModel):
    """State of every folder for one session.

    Args:
        folders: Folder state per folder.
    """

    model_config = ConfigDict(frozen=True)

    folders: dict[Folder, FolderState] = Field(description="State per folder")

    @classmethod
    def initial(cls, page_size: int = DEFAULT_PAGE_SIZE) -> "MailboxState":
        """Create the empty state with every folder present.

        Args:
            page_size: Page size used for every folder.

        Returns:
            A fresh MailboxState.
        """
        return cls(folders={folder: FolderState(page_size=page_size) for folder in Folder})

    def folder(self, folder: Folder | str) -> FolderState:
        """Return the state of one folder."""
        return self.folders[Folder(folder)]


# Actions


class SetEmails(BaseModel):
    """Replace a folder's loaded page with a fetch result.

    ``page`` records which page the emails belong to; None keeps the
    folder's current page.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["SET_EMAILS"] = "SET_EMAILS"
    folder: Folder
    emails: tuple[Email, ...]
    total_count: int = Field(ge=0)
    page: int | None = Field(default=None, ge=1)


class SelectEmail(BaseModel):
    """Select the email with the given id (or nothing if it is not loaded)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["SELECT_EMAIL"] = "SELECT_EMAIL"
    folder: Folder
    email_id: str | None


class AddEmail(BaseModel):
    """Append a new email to a folder."""

    model_config = ConfigDict(frozen=True)

    type: Literal["ADD_EMAIL"] = "ADD_EMAIL"
    folder: Folder
    email: Email


class ToggleStar(BaseModel):
    """Flip the starred flag of a loaded email."""

    model_config = ConfigDict(frozen=True)

    type: Literal["TOGGLE_STAR"] = "TOGGLE_STAR"
    folder: Folder
    email_id: str


class ReplyEmail(BaseModel):
    """Signal that a reply/forward compose was opened. No state effect."""

    model_config = ConfigDict(frozen=True)

    type: Literal["REPLY_EMAIL"] = "REPLY_EMAIL"
    folder: Folder
    mode: ReplyMode
    email: Email


class SetPage(BaseModel):
    """Record the page a folder is showing."""

    model_config = ConfigDict(frozen=True)

    type: Literal["SET_PAGE"] = "SET_PAGE"
    folder: Folder
    page: int = Field(ge=1)


FolderAction = Annotated[
    Union[SetEmails, SelectEmail, AddEmail, ToggleStar, ReplyEmail, SetPage],
    Field(discriminator="type"),
]


def _replace_folder(state: MailboxState, folder: Folder, **update) -> MailboxState:
    """Return a copy of the state with one folder's fields updated.

    Args:
        state: The current state. Not modified.
        folder: The folder to update.
        **update: FolderState fields to replace.

    Returns:
        The new state; other folders keep their existing FolderState.
    """
    updated = state.folders[folder].model_copy(update=update)
    return state.model_copy(update={"folders": {**state.folders, folder: updated}})


def _resolve_selection(selected: Email | None, emails: tuple[Email, ...]) -> Email | None:
    """Find the selected email's counterpart in a new list of emails.

    Keeps the selection pointing at an element of ``emails``.

    Args:
        selected: The currently selected email, if any.
        emails: The folder's new emails.

    Returns:
        The email in ``emails`` with the selected id, or None if absent.
    """
    if selected is None:
        return None
    for email in emails:
        if email.id == selected.id:
            return email
    return None


def _set_emails(state: MailboxState, action: SetEmails) -> MailboxState:
    current = state.folders[action.folder]
    return _replace_folder(
        state,
        action.folder,
        emails=action.emails,
        total_count=action.total_count,
        selected_email=_resolve_selection(current.selected_email, action.emails),
        page=action.page or current.page,
    )


def _select_email(state: MailboxState, action: SelectEmail) -> MailboxState:
    current = state.folders[action.folder]
    selected = current.find(action.email_id) if action.email_id else None
    if action.email_id and selected is None:
        logger.warning(
            "Email %s not loaded in folder %s, clearing selection",
            action.email_id,
            action.folder.value,
        )
    return _replace_folder(state, action.folder, selected_email=selected)


def _add_email(state: MailboxState, action: AddEmail) -> MailboxState:
    current = state.folders[action.folder]
    return _replace_folder(
        state,
        action.folder,
        emails=(*current.emails, action.email),
        total_count=current.total_count + 1,
    )


def _toggle_star(state: MailboxState, action: ToggleStar) -> MailboxState:
    current = state.folders[action.folder]
    emails = tuple(
        email.toggled_star() if email.id == action.email_id else email
        for email in current.emails
    )
    return _replace_folder(
        state,
        action.folder,
        emails=emails,
        selected_email=_resolve_selection(current.selected_email, emails),
    )


def _reply_email(state: MailboxState, action: ReplyEmail) -> MailboxState:
    return state


def _set_page(state: MailboxState, action: SetPage) -> MailboxState:
    return _replace_folder(state, action.folder, page=action.page)


_ACTION_HANDLERS: dict[type, Callable[[MailboxState, BaseModel], MailboxState]] = {
    SetEmails: _set_emails,
    SelectEmail: _select_email,
    AddEmail: _add_email,
    ToggleStar: _toggle_star,
    ReplyEmail: _reply_email,
    SetPage: _set_page,
}


def apply_action(state: MailboxState, action: FolderAction) -> MailboxState:
    """Compute the state that follows applying one action.

    Args:
        state: The current state. Not modified.
        action: One of the recognized folder actions.

    Returns:
        The next state.

    Raises:
        UnknownActionError: If the action is not a recognized action type.
    """
    handler = _ACTION_HANDLERS.get(type(action))
    if handler is None:
        raise UnknownActionError(action)
    return handler(state, action)


Listener = Callable[[MailboxState, BaseModel], None]


class FolderStore:
    """Session-scoped holder of the mailbox state.

    Created once when a user session starts and passed to every consumer.
    All writes go through ``dispatch``; readers get immutable snapshots.

    The store also hands out per-folder fetch tokens so that only the most
    recently started page fetch of a folder is applied.

    Attributes:
        action_log: The most recently dispatched actions, oldest first.
    """

    def __init__(
        self,
        initial_state: MailboxState | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the store.

        Args:
            initial_state: Starting state (defaults to empty folders).
            page_size: Page size for the default empty state.
        """
        self._state = initial_state or MailboxState.initial(page_size=page_size)
        self._listeners: list[Listener] = []
        self._fetch_tokens: dict[Folder, int] = {}
        self.action_log: deque[BaseModel] = deque(maxlen=ACTION_LOG_SIZE)

    @property
    def state(self) -> MailboxState:
        """The current state snapshot."""
        return self._state

    def folder(self, folder: Folder | str) -> FolderState:
        """Return the current state of one folder."""
        return self._state.folder(folder)

    def dispatch(self, action: FolderAction) -> MailboxState:
        """Apply an action and publish the new state to subscribers.

        Args:
            action: The action to apply.

        Returns:
            The new state.

        Raises:
            UnknownActionError: If the action is not recognized.
        """
        next_state = apply_action(self._state, action)
        logger.debug("Dispatched %s on folder %s", action.type, action.folder.value)
        self._state = next_state
        self.action_log.append(action)
        for listener in list(self._listeners):
            listener(next_state, action)
        return next_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every dispatch.

        Args:
            listener: Called with the new state and the applied action.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def issue_fetch_token(self, folder: Folder | str) -> int:
        """Start a page fetch for a folder and return its sequence token."""
        folder = Folder(folder)
        token = self._fetch_tokens.get(folder, 0) + 1
        self._fetch_tokens[folder] = token
        return token

    def is_latest_fetch(self, folder: Folder | str, token: int) -> bool:
        """Whether no newer fetch was started for the folder since ``token``."""
        return self._fetch_tokens.get(Folder(folder), 0) == token
