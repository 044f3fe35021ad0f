"""Random identifiers for scopes, folders and layout pins."""

import random
import string

ID_LENGTH = 20

_ID_ALPHABET = string.ascii_letters + string.digits


def generate_id(length: int = ID_LENGTH) -> str:
    """Return a random alphanumeric identifier."""
    return "".join(random.choices(_ID_ALPHABET, k=length))
