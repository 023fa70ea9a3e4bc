"""Client-side mailbox state for the webmail client.

This package holds the folder-scoped state store, compose sessions with
recipient validation, reply/forward prefill, and the star-toggle protocol.
It talks to the remote mail store only through the ``MailStore`` protocol.
"""

from mailstate.addresses import AddressValidation, validate_address_list
from mailstate.compose import ComposeSession, ComposeStatus
from mailstate.email import Email, Folder, FolderPage
from mailstate.errors import ProgrammingError, RemoteError, SessionClosedError, UnknownActionError
from mailstate.fields import ComposeField, ComposeFields
from mailstate.folder_screen import FolderScreen
from mailstate.folder_store import (
    AddEmail,
    FolderState,
    FolderStore,
    MailboxState,
    ReplyEmail,
    SelectEmail,
    SetEmails,
    SetPage,
    ToggleStar,
    apply_action,
)
from mailstate.ids import generate_message_id
from mailstate.mail_store import MailStore
from mailstate.prefill import ReplyMode, derive_prefill
from mailstate.star_sync import StarSyncCoordinator

__all__ = [
    "AddEmail",
    "AddressValidation",
    "ComposeField",
    "ComposeFields",
    "ComposeSession",
    "ComposeStatus",
    "Email",
    "Folder",
    "FolderPage",
    "FolderScreen",
    "FolderState",
    "FolderStore",
    "MailStore",
    "MailboxState",
    "ProgrammingError",
    "RemoteError",
    "ReplyEmail",
    "ReplyMode",
    "SelectEmail",
    "SessionClosedError",
    "SetEmails",
    "SetPage",
    "StarSyncCoordinator",
    "ToggleStar",
    "UnknownActionError",
    "apply_action",
    "derive_prefill",
    "generate_message_id",
    "validate_address_list",
]
