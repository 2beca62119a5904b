"""Utility helpers for paste-server."""

from paste_server.utils.id_generator import (
    ACCESS_KEY_ALPHABET,
    generate_access_key,
    generate_paste_id,
)


__all__ = ["ACCESS_KEY_ALPHABET", "generate_access_key", "generate_paste_id"]
