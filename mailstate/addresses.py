"""Recipient address-list parsing and validation.

Address-list fields are free text holding addresses separated by ``;``.
Tokens are trimmed and empty tokens (from repeated or trailing delimiters)
are dropped before validation and before submission.
"""

import re
from typing import Iterable

from pydantic import BaseModel, Field

# local-part@domain.tld, no whitespace, a single "@"
ADDRESS_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ADDRESS_DELIMITER = ";"


class AddressValidation(BaseModel):
    """Result of validating one address-list field.

    Args:
        is_valid: True if no token failed the address rule.
        invalid_tokens: Failing tokens in their original order.
    """

    is_valid: bool = Field(description="Whether every token is a valid address")
    invalid_tokens: list[str] = Field(
        default_factory=list, description="Tokens that failed validation"
    )


def split_address_list(text: str) -> list[str]:
    """Split an address-list string into trimmed, non-empty tokens.

    Args:
        text: Raw field text, e.g. ``"a@b.com; ;c@d.com"``.

    Returns:
        The tokens in order, e.g. ``["a@b.com", "c@d.com"]``.
    """
    tokens = (token.strip() for token in text.split(ADDRESS_DELIMITER))
    return [token for token in tokens if token]


def join_address_list(tokens: Iterable[str]) -> str:
    """Join address tokens into the canonical ``"a; b"`` form.

    Args:
        tokens: Addresses to join. Blank entries are skipped.

    Returns:
        The joined address list (empty string for no tokens).
    """
    return f"{ADDRESS_DELIMITER} ".join(token.strip() for token in tokens if token.strip())


def normalize_address_list(text: str) -> str:
    """Rewrite an address-list string without blank tokens or stray spaces."""
    return join_address_list(split_address_list(text))


def is_valid_address(address: str) -> bool:
    """Check a single token against the address rule."""
    return ADDRESS_PATTERN.match(address) is not None


def validate_address_list(text: str) -> AddressValidation:
    """Validate every address in an address-list field.

    An empty field (or one holding only delimiters and whitespace) is valid;
    whether a field is mandatory is decided by the caller.

    Args:
        text: Raw field text.

    Returns:
        AddressValidation listing the invalid tokens in original order.
    """
    invalid = [token for token in split_address_list(text) if not is_valid_address(token)]
    return AddressValidation(is_valid=not invalid, invalid_tokens=invalid)
