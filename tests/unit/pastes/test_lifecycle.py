"""Tests for PasteLifecycleManager create and edit."""

import random
from datetime import timedelta

import pytest

from paste_server.config.paste import PasteSettings
from paste_server.exceptions import ValidationError
from paste_server.pastes.lifecycle import PasteLifecycleManager
from paste_server.pastes.models import Paste, PasteCreate, PasteUpdate
from paste_server.utils.id_generator import ACCESS_KEY_ALPHABET


def create(**fields) -> PasteCreate:
    return PasteCreate.model_validate(fields)


def update(**fields) -> PasteUpdate:
    return PasteUpdate.model_validate(fields)


@pytest.fixture
def existing(manager: PasteLifecycleManager) -> Paste:
    return manager.create(
        create(content=["print('hi')"], name="script", fileType="python")
    )


class TestCreate:
    """Tests for building new pastes."""

    def test_populates_derived_fields(self, manager, clock):
        paste = manager.create(create(content=["a", "b"], name="n", fileType="go"))

        assert paste.content == ["a", "b"]
        assert paste.name == "n"
        assert paste.file_type == "go"
        assert paste.expires_at == clock.now + timedelta(days=14)
        assert paste.created_at == clock.now
        assert paste.revision == 0
        assert len(paste.id) == 22

    def test_file_type_defaults_to_plaintext(self, manager):
        paste = manager.create(create(content=["a"]))

        assert paste.file_type == "plaintext"
        assert paste.name is None

    @pytest.mark.parametrize("days", [1, 7, 30])
    def test_expiry_within_range_is_used(self, manager, clock, days):
        paste = manager.create(create(content=["a"], expiresIn=days))

        assert paste.expires_at == clock.now + timedelta(days=days)

    @pytest.mark.parametrize("days", [0, -3, 31, 365])
    def test_expiry_out_of_range_falls_back_to_default(self, manager, clock, days):
        paste = manager.create(create(content=["a"], expiresIn=days))

        assert paste.expires_at == clock.now + timedelta(days=14)

    @pytest.mark.parametrize("content", [None, []])
    def test_content_required(self, manager, content):
        with pytest.raises(ValidationError, match="Content field empty"):
            manager.create(create(content=content))

    def test_supplied_access_key_is_ignored(self, manager):
        paste = manager.create(create(content=["a"], accessKey="chosen-by-client"))

        assert paste.access_key != "chosen-by-client"

    def test_access_key_shape(self, manager):
        paste = manager.create(create(content=["a"]))

        assert len(paste.access_key) == 25
        assert set(paste.access_key) <= set(ACCESS_KEY_ALPHABET)

    def test_each_paste_gets_fresh_id_and_key(self, manager):
        first = manager.create(create(content=["a"]))
        second = manager.create(create(content=["a"]))

        assert first.id != second.id
        assert first.access_key != second.access_key

    def test_seeded_random_source_is_reproducible(self, paste_settings, clock):
        def key_from(seed: int) -> str:
            mgr = PasteLifecycleManager(
                paste_settings, rng=random.Random(seed), clock=clock
            )
            return mgr.create(create(content=["a"])).access_key

        assert key_from(7) == key_from(7)
        assert key_from(7) != key_from(8)

    def test_policy_comes_from_settings(self, clock):
        settings = PasteSettings(
            default_expiry_days=2,
            max_expiry_days=3,
            access_key_length=10,
            default_file_type="text",
        )
        mgr = PasteLifecycleManager(settings, clock=clock)

        paste = mgr.create(create(content=["a"], expiresIn=5))

        assert paste.expires_at == clock.now + timedelta(days=2)
        assert len(paste.access_key) == 10
        assert paste.file_type == "text"


class TestEdit:
    """Tests for applying partial edits."""

    def test_applies_supplied_fields_only(self, manager, existing, clock):
        clock.advance(days=3)

        edited = manager.edit(existing, update(content=["print('bye')"]))

        assert edited.content == ["print('bye')"]
        assert edited.name == "script"
        assert edited.file_type == "python"
        assert edited.id == existing.id
        assert edited.access_key == existing.access_key
        assert edited.expires_at == clock.now + timedelta(days=14)

    def test_leaves_existing_untouched(self, manager, existing):
        original = existing.model_copy(deep=True)

        manager.edit(existing, update(name="renamed", content=["x"]))

        assert existing == original

    def test_every_edit_extends_expiry(self, manager, existing, clock):
        clock.advance(days=10)

        edited = manager.edit(existing, update(name="renamed"))

        assert edited.expires_at == clock.now + timedelta(days=14)

    def test_expires_in_alone_is_an_update(self, manager, existing, clock):
        edited = manager.edit(existing, update(expiresIn=30))

        assert edited.expires_at == clock.now + timedelta(days=30)

    def test_rotates_access_key(self, manager, existing):
        edited = manager.edit(
            existing, update(accessKey=existing.access_key, newAccessKey="rotated")
        )

        assert edited.access_key == "rotated"
        assert existing.access_key != "rotated"

    @pytest.mark.parametrize(
        "fields",
        [
            {},
            {"accessKey": "anything"},
            {"name": "", "fileType": ""},
            {"expiresIn": 0},
            {"newAccessKey": ""},
        ],
    )
    def test_nothing_supplied(self, manager, existing, fields):
        with pytest.raises(ValidationError, match="No updates given"):
            manager.edit(existing, update(**fields))

    @pytest.mark.parametrize(
        ("fields", "label"),
        [
            ({"content": ["print('hi')"]}, "content"),
            ({"name": "script"}, "name"),
            ({"fileType": "python"}, "fileType"),
        ],
    )
    def test_unchanged_field_is_rejected(self, manager, existing, fields, label):
        with pytest.raises(ValidationError, match=f"No changes made to {label} field"):
            manager.edit(existing, update(**fields))

    def test_rotating_to_the_current_key_is_allowed(self, manager, existing):
        edited = manager.edit(existing, update(newAccessKey=existing.access_key))

        assert edited.access_key == existing.access_key

    def test_repeating_a_field_fails_even_when_another_changes(self, manager, existing):
        with pytest.raises(ValidationError, match="No changes made to fileType field"):
            manager.edit(existing, update(content=["new"], fileType="python"))

    def test_empty_content_is_rejected(self, manager, existing):
        with pytest.raises(ValidationError, match="Content field empty"):
            manager.edit(existing, update(content=[]))

    @pytest.mark.parametrize("days", [-1, 31, 1000])
    def test_expiry_out_of_range_is_rejected(self, manager, existing, days):
        with pytest.raises(ValidationError, match="Expiration time outside valid range"):
            manager.edit(existing, update(name="renamed", expiresIn=days))

    @pytest.mark.parametrize("days", [1, 30])
    def test_expiry_bounds_are_inclusive(self, manager, existing, clock, days):
        edited = manager.edit(existing, update(expiresIn=days))

        assert edited.expires_at == clock.now + timedelta(days=days)

    def test_no_op_check_runs_before_range_check(self, manager, existing):
        with pytest.raises(ValidationError, match="No changes made to name field"):
            manager.edit(existing, update(name="script", expiresIn=99))
