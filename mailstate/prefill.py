"""Initial compose values for reply, reply-all and forward.

The prefill engine turns a source email and a mode into the starting field
values of a ComposeSession. Address fields are built from stored addresses,
but the session re-validates them because the user may edit them.
"""

from enum import Enum

from mailstate.addresses import join_address_list, split_address_list
from mailstate.email import Email
from mailstate.fields import ComposeFields

REPLY_PREFIX = "Re: "
FORWARD_PREFIX = "Fwd: "
FORWARD_HEADER = "---------- Forwarded message ----------"
QUOTE_PREFIX = "> "


class ReplyMode(str, Enum):
    """How a compose session derives from an existing email."""

    REPLY = "reply"
    REPLY_ALL = "replyAll"
    FORWARD = "forward"


def _prefixed_subject(subject: str, prefix: str, markers: tuple[str, ...]) -> str:
    if subject.strip().lower().startswith(markers):
        return subject
    return f"{prefix}{subject}"


def _quote_body(source: Email) -> str:
    quoted = "\n".join(f"{QUOTE_PREFIX}{line}" for line in source.body.split("\n"))
    return f"\n\nOn {source.from_address} wrote:\n{quoted}"


def _forward_body(source: Email) -> str:
    header = [FORWARD_HEADER, f"From: {source.from_address}", f"To: {source.to}"]
    if source.cc:
        header.append(f"Cc: {source.cc}")
    header.append(f"Subject: {source.subject}")
    return "\n\n" + "\n".join(header) + "\n\n" + source.body


def _without(addresses: list[str], excluded: set[str]) -> list[str]:
    """Drop excluded addresses and duplicates, comparing case-insensitively."""
    kept = []
    seen = set(excluded)
    for address in addresses:
        key = address.lower()
        if key in seen:
            continue
        seen.add(key)
        kept.append(address)
    return kept


def derive_prefill(source: Email, mode: ReplyMode, viewer_address: str) -> ComposeFields:
    """Derive initial compose fields from an existing email.

    Args:
        source: The email being replied to or forwarded.
        mode: Reply, reply-all or forward.
        viewer_address: The current user's address; excluded from reply-all
            recipients.

    Returns:
        ComposeFields with recipients, subject and body filled in.

    Raises:
        ValueError: If mode is not a ReplyMode.
    """
    mode = ReplyMode(mode)

    if mode is ReplyMode.FORWARD:
        return ComposeFields(
            subject=_prefixed_subject(source.subject, FORWARD_PREFIX, ("fwd:", "fw:")),
            body=_forward_body(source),
        )

    subject = _prefixed_subject(source.subject, REPLY_PREFIX, ("re:",))
    body = _quote_body(source)

    if mode is ReplyMode.REPLY:
        return ComposeFields(to=source.from_address.strip(), subject=subject, body=body)

    viewer = {viewer_address.strip().lower()} if viewer_address else set()
    to = _without([source.from_address.strip(), *split_address_list(source.to)], viewer)
    cc = _without(split_address_list(source.cc), viewer | {a.lower() for a in to})

    return ComposeFields(
        to=join_address_list(to),
        cc=join_address_list(cc),
        subject=subject,
        body=body,
    )
