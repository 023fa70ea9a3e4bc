"""Editable compose fields shared by the prefill engine and compose sessions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ComposeField(str, Enum):
    """The editable fields of a message being composed."""

    TO = "to"
    CC = "cc"
    BCC = "bcc"
    SUBJECT = "subject"
    BODY = "body"

    @property
    def is_recipient(self) -> bool:
        """Whether this field holds an address list."""
        return self in RECIPIENT_FIELDS


RECIPIENT_FIELDS = (ComposeField.TO, ComposeField.CC, ComposeField.BCC)


class ComposeFields(BaseModel):
    """Values of the editable fields of one message.

    Args:
        to: Primary recipient address list.
        cc: CC recipient address list.
        bcc: BCC recipient address list.
        subject: Subject line.
        body: Plain text body.
    """

    model_config = ConfigDict(frozen=True)

    to: str = Field(default="", description="Primary recipient address list")
    cc: str = Field(default="", description="CC recipient address list")
    bcc: str = Field(default="", description="BCC recipient address list")
    subject: str = Field(default="", description="Subject line")
    body: str = Field(default="", description="Plain text body")

    def get(self, field: ComposeField) -> str:
        """Return the value of one field."""
        return getattr(self, field.value)
