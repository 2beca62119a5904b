"""Paste construction and mutation.

The manager is pure: it neither authorizes nor persists. Randomness, the clock
and the identifier factory are injected so behaviour is reproducible in tests.
"""

import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from paste_server.config.paste import PasteSettings
from paste_server.exceptions import ValidationError
from paste_server.utils.id_generator import generate_access_key, generate_paste_id

from .models import Paste, PasteCreate, PasteUpdate


__all__ = ["PasteLifecycleManager"]


Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PasteLifecycleManager:
    """Builds new pastes and applies partial edits to existing ones."""

    def __init__(
        self,
        settings: PasteSettings,
        rng: random.Random | None = None,
        clock: Clock | None = None,
        id_factory: Callable[[], str] = generate_paste_id,
    ) -> None:
        self.settings = settings
        self._rng = rng
        self._clock = clock or _utc_now
        self._id_factory = id_factory

    def create(self, body: PasteCreate) -> Paste:
        """Build a new paste from a create request.

        Out-of-range ``expiresIn`` values fall back to the default lifetime.
        Any access key in the body is ignored.

        Raises:
            ValidationError: content is absent or empty
        """
        if not body.content:
            raise ValidationError("Content field empty")

        days = self.settings.default_expiry_days
        if body.expires_in is not None and self.settings.in_expiry_range(
            body.expires_in
        ):
            days = body.expires_in

        now = self._clock()
        return Paste(
            id=self._id_factory(),
            content=list(body.content),
            name=body.name or None,
            file_type=body.file_type or self.settings.default_file_type,
            expires_at=now + timedelta(days=days),
            access_key=self.generate_access_key(),
            created_at=now,
        )

    def edit(self, existing: Paste, body: PasteUpdate) -> Paste:
        """Apply the supplied fields of ``body`` to a copy of ``existing``.

        Every supplied field is checked against its current value before
        anything is merged, so repeating an unchanged value fails the whole
        edit even when other fields do change.

        Raises:
            ValidationError: nothing supplied, a supplied field is unchanged,
                content is empty, or expiresIn is out of range
        """
        changes = self._supplied_fields(body)
        if not changes and not body.expires_in:
            raise ValidationError("No updates given")

        self._check_for_no_ops(existing, changes)

        if "content" in changes and not changes["content"]:
            raise ValidationError("Content field empty")

        days = self.settings.default_expiry_days
        if body.expires_in:
            if not self.settings.in_expiry_range(body.expires_in):
                raise ValidationError(
                    "Expiration time outside valid range",
                    min_days=self.settings.min_expiry_days,
                    max_days=self.settings.max_expiry_days,
                )
            days = body.expires_in

        if "content" in changes:
            changes["content"] = list(changes["content"])
        changes["expires_at"] = self._clock() + timedelta(days=days)
        return existing.model_copy(update=changes)

    def generate_access_key(self) -> str:
        return generate_access_key(self.settings.access_key_length, self._rng)

    @staticmethod
    def _supplied_fields(body: PasteUpdate) -> dict[str, Any]:
        """Fields the body sets, keyed by Paste attribute name.

        Empty strings count as absent; an empty content list counts as present.
        """
        changes: dict[str, Any] = {}
        if body.content is not None:
            changes["content"] = body.content
        if body.name:
            changes["name"] = body.name
        if body.file_type:
            changes["file_type"] = body.file_type
        if body.new_access_key:
            changes["access_key"] = body.new_access_key
        return changes

    @staticmethod
    def _check_for_no_ops(existing: Paste, changes: dict[str, Any]) -> None:
        # The access key is left out: this runs before authorization, and
        # comparing it here would reveal whether a guess matches.
        labels = {"content": "content", "name": "name", "file_type": "fileType"}
        for attribute, label in labels.items():
            if attribute in changes and changes[attribute] == getattr(
                existing, attribute
            ):
                raise ValidationError(
                    f"No changes made to {label} field", field=label
                )
