"""Integration tests running pastes end to end on SQLite."""

import random

import pytest
from fastapi.testclient import TestClient

from paste_server.api.app import create_app
from paste_server.config.paste import PasteSettings
from paste_server.config.settings import Settings
from paste_server.db import close_db, init_db
from paste_server.db.repositories import PasteRepository
from paste_server.exceptions import ConflictError, PersistenceError
from paste_server.pastes import (
    PasteCreate,
    PasteDelete,
    PasteLifecycleManager,
    PasteService,
    PasteUpdate,
)


class InterleavingRepository(PasteRepository):
    """Runs a competing operation just before the next write lands."""

    def __init__(self) -> None:
        super().__init__()
        self.before_next_write = None

    async def _interleave(self) -> None:
        if self.before_next_write is not None:
            competing, self.before_next_write = self.before_next_write, None
            await competing()

    async def update(self, paste, expected_revision):
        await self._interleave()
        return await super().update(paste, expected_revision)

    async def delete(self, paste_id, expected_access_key):
        await self._interleave()
        return await super().delete(paste_id, expected_access_key)


@pytest.fixture
async def sqlite_service(tmp_path):
    await init_db(tmp_path / "pastes.db")
    store = InterleavingRepository()
    manager = PasteLifecycleManager(PasteSettings(), rng=random.Random(99))
    yield PasteService(store=store, manager=manager)
    await close_db()


def test_full_paste_lifecycle_over_http(tmp_path):
    """Create, read, edit, rotate and delete through the app on SQLite."""
    settings = Settings(
        storage={"backend": "sqlite", "database_path": str(tmp_path / "http.db")}
    )

    with TestClient(create_app(settings=settings)) as client:
        created = client.post(
            "/", json={"content": ["a", "b"], "name": "demo", "expiresIn": 3}
        ).json()
        paste_url = f"/{created['id']}"

        fetched = client.get(paste_url).json()
        assert fetched["content"] == ["a", "b"]
        assert fetched["fileType"] == "plaintext"
        assert "accessKey" not in fetched

        edited = client.put(
            paste_url,
            json={
                "accessKey": created["accessKey"],
                "content": ["c"],
                "newAccessKey": "second-key",
            },
        )
        assert edited.status_code == 200
        assert client.get(paste_url).json()["content"] == ["c"]

        deleted = client.request(
            "DELETE", paste_url, json={"accessKey": "second-key"}
        )
        assert deleted.status_code == 204
        assert client.get(paste_url).status_code == 400

    assert (tmp_path / "http.db").exists()


def test_pastes_survive_restart(tmp_path):
    settings = Settings(
        storage={"backend": "sqlite", "database_path": str(tmp_path / "keep.db")}
    )

    with TestClient(create_app(settings=settings)) as client:
        paste_id = client.post("/", json={"content": ["kept"]}).json()["id"]

    with TestClient(create_app(settings=settings)) as client:
        assert client.get(f"/{paste_id}").json()["content"] == ["kept"]


@pytest.mark.asyncio
async def test_edit_racing_another_edit_conflicts(sqlite_service):
    service = sqlite_service
    created = await service.create(PasteCreate.model_validate({"content": ["v1"]}))
    key = created.access_key

    async def competing_edit() -> None:
        await service.edit(
            created.id,
            PasteUpdate.model_validate({"accessKey": key, "content": ["v2"]}),
        )

    service.store.before_next_write = competing_edit

    with pytest.raises(ConflictError):
        await service.edit(
            created.id,
            PasteUpdate.model_validate({"accessKey": key, "content": ["v3"]}),
        )

    current = await service.get(created.id)
    assert current.content == ["v2"]
    assert current.revision == 1


@pytest.mark.asyncio
async def test_delete_racing_key_rotation_is_not_applied(sqlite_service):
    service = sqlite_service
    created = await service.create(PasteCreate.model_validate({"content": ["v1"]}))

    async def rotate_key() -> None:
        await service.edit(
            created.id,
            PasteUpdate.model_validate(
                {"accessKey": created.access_key, "newAccessKey": "rotated"}
            ),
        )

    service.store.before_next_write = rotate_key

    with pytest.raises(PersistenceError):
        await service.delete(
            created.id, PasteDelete.model_validate({"accessKey": created.access_key})
        )

    assert (await service.get(created.id)).access_key == "rotated"


@pytest.mark.asyncio
async def test_sequential_edits_advance_revision(sqlite_service):
    service = sqlite_service
    created = await service.create(PasteCreate.model_validate({"content": ["v1"]}))

    for version in range(2, 5):
        await service.edit(
            created.id,
            PasteUpdate.model_validate(
                {"accessKey": created.access_key, "content": [f"v{version}"]}
            ),
        )

    current = await service.get(created.id)
    assert current.content == ["v4"]
    assert current.revision == 3
