from __future__ import annotations

import secrets
import string

from relay.constants import STATE_LENGTH

STATE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_random_string(length: int = STATE_LENGTH) -> str:
    """Return ``length`` characters drawn uniformly from ``STATE_ALPHABET``."""
    if length < 1:
        raise ValueError("length must be a positive integer.")
    return "".join(secrets.choice(STATE_ALPHABET) for _ in range(length))
