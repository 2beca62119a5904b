"""Utility functions for generating paste identifiers and access keys."""

import random
import secrets
import string

import shortuuid


ACCESS_KEY_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

_system_random = secrets.SystemRandom()


def generate_paste_id() -> str:
    """Generate a public paste identifier.

    Returns:
        str: Short URL-safe ID (22 characters)
    """
    return shortuuid.uuid()


def generate_access_key(length: int, rng: random.Random | None = None) -> str:
    """Draw ``length`` characters uniformly from ACCESS_KEY_ALPHABET.

    Args:
        length: Number of characters
        rng: Random source; defaults to the process-wide SystemRandom

    Returns:
        str: The generated key
    """
    source = rng if rng is not None else _system_random
    return "".join(source.choice(ACCESS_KEY_ALPHABET) for _ in range(length))
