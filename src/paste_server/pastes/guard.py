"""Access key check gating edit and delete."""

import secrets

from paste_server.exceptions import AuthorizationError


__all__ = ["AuthorizationGuard"]


class AuthorizationGuard:
    """Permits a mutation only when the caller presents the stored access key.

    Callers must pass the key read from storage before any pending edit was
    applied, so a rotating edit is authorized by the old key.
    """

    def authorize(self, supplied: str | None, stored: str) -> None:
        """Raise AuthorizationError unless ``supplied`` equals ``stored``."""
        if not supplied:
            raise AuthorizationError()
        if not secrets.compare_digest(supplied.encode(), stored.encode()):
            raise AuthorizationError()
