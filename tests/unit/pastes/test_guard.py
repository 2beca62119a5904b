"""Tests for AuthorizationGuard."""

import pytest

from paste_server.exceptions import AuthorizationError
from paste_server.pastes.guard import AuthorizationGuard


class TestAuthorizationGuard:
    """Tests for access key comparison."""

    def test_matching_key_is_permitted(self):
        AuthorizationGuard().authorize("abc123", "abc123")

    @pytest.mark.parametrize("supplied", [None, "", "abc124", "ABC123", "abc123 "])
    def test_anything_else_is_rejected(self, supplied):
        with pytest.raises(AuthorizationError) as exc_info:
            AuthorizationGuard().authorize(supplied, "abc123")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid access key"

    def test_non_ascii_keys_compare(self):
        with pytest.raises(AuthorizationError):
            AuthorizationGuard().authorize("clé", "cle")
