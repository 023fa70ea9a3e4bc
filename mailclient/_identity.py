"""Resolve the signed-in user's address from a stored credential.

The credential is a JWT issued by the mail store's auth service. Only the
payload is read (the mail store verifies the signature on every request), and
its ``email`` claim is the user's address.

This is an internal module. Import from `mailclient` instead.
"""

import base64
import binascii
import json
import logging

logger = logging.getLogger(__name__)


def _decode_segment(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    if not isinstance(payload, dict):
        raise ValueError("JWT payload is not an object")
    return payload


class IdentityProvider:
    """Reads the viewer's address out of a stored credential.

    A missing or malformed credential resolves to no identity rather than an
    error; callers block composition in that case.
    """

    def __init__(self, token: str | None) -> None:
        """Initialize the provider.

        Args:
            token: The stored JWT credential, or None if not signed in.
        """
        self._token = token

    def current_address(self) -> str | None:
        """Return the signed-in user's address, or None if unknown."""
        if not self._token:
            logger.info("No stored credential, no identity available")
            return None

        parts = self._token.split(".")
        if len(parts) != 3:
            logger.warning("Stored credential is not a JWT, no identity available")
            return None

        try:
            payload = _decode_segment(parts[1])
        except (ValueError, UnicodeEncodeError, binascii.Error) as e:
            logger.warning("Could not decode stored credential: %s", e)
            return None

        address = payload.get("email")
        if not isinstance(address, str) or not address.strip():
            logger.warning("Stored credential has no email claim")
            return None
        return address.strip()
