"""Email value model and folder enumeration."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Folder(str, Enum):
    """Named partitions of a mailbox."""

    INBOX = "inbox"
    STARRED = "starred"
    SENT = "sent"
    DRAFTS = "drafts"
    TRASH = "trash"


class Email(BaseModel):
    """Represents one email message as the mail store returns it.

    Emails are immutable values. State changes (such as starring) produce a
    new instance via ``model_copy``.

    Address fields hold semicolon-joined address lists, e.g.
    ``"a@example.com; b@example.com"``.

    Args:
        id: Opaque message identifier.
        from_address: Sender address (``from`` on the wire).
        to: Primary recipients.
        cc: CC recipients.
        bcc: BCC recipients.
        subject: Subject line.
        body: Plain text body.
        starred: Starred/flagged status.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Opaque message identifier")
    from_address: str = Field(default="", alias="from", description="Sender address")
    to: str = Field(default="", description="Primary recipient address list")
    cc: str = Field(default="", description="CC recipient address list")
    bcc: str = Field(default="", description="BCC recipient address list")
    subject: str = Field(default="", description="Email subject line")
    body: str = Field(default="", description="Plain text body content")
    starred: bool = Field(default=False, description="Starred/flagged status")

    @field_validator("from_address", "to", "cc", "bcc", "subject", "body", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        """Treat null text fields from the server as empty strings."""
        return "" if value is None else value

    def toggled_star(self) -> "Email":
        """Return a copy of this email with the starred flag flipped."""
        return self.model_copy(update={"starred": not self.starred})

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the mail store's JSON field names.

        Returns:
            Dictionary with ``from`` instead of ``from_address``.
        """
        return self.model_dump(by_alias=True)


class FolderPage(BaseModel):
    """One page of a folder as returned by the mail store.

    Args:
        emails: Emails on the page, in server order.
        total_count: Total number of emails in the folder (``totalEmails``).
    """

    model_config = ConfigDict(populate_by_name=True)

    emails: list[Email] = Field(default_factory=list, description="Emails on this page")
    total_count: int = Field(default=0, ge=0, alias="totalEmails", description="Folder total")
