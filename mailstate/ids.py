"""Client-side message id generation."""

import secrets
import string

ID_ALPHABET = string.ascii_letters + string.digits

# 62^10 possible ids
DEFAULT_ID_LENGTH = 10


def generate_message_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Generate a short, collision-resistant opaque id for a new message.

    Args:
        length: Number of characters (at least 10).

    Returns:
        A random alphanumeric string.

    Raises:
        ValueError: If length is below 10.
    """
    if length < DEFAULT_ID_LENGTH:
        raise ValueError(f"Message ids need at least {DEFAULT_ID_LENGTH} characters, got {length}")
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))
