"""Tests for ledger repositories."""

import json
from datetime import datetime, timezone

import pytest

from src.api.models import User
from src.config.settings import Settings
from src.infrastructure.repository import (
    InMemoryRepository,
    JsonFileRepository,
    create_repository,
)

from tests.helpers import PNG_URI


def _user(user_id="user1", name="Farah"):
    return User(
        id=user_id,
        name=name,
        contact="9000000003",
        id_proof="DL-5566",
        face_image=PNG_URI,
        created_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
    )


@pytest.mark.asyncio
async def test_memory_repository_returns_copies():
    repo = InMemoryRepository()
    await repo.save_user(_user())

    fetched = await repo.get_user("user1")
    fetched.name = "Changed"
    assert (await repo.get_user("user1")).name == "Farah"


@pytest.mark.asyncio
async def test_allocate_id_skips_existing_ids():
    repo = InMemoryRepository([_user("user1"), _user("user2")])
    assert await repo.allocate_id("user") == "user3"
    assert await repo.allocate_id("loan") == "loan1"


@pytest.mark.asyncio
async def test_delete_user():
    repo = InMemoryRepository([_user()])
    assert await repo.delete_user("user1") is True
    assert await repo.delete_user("user1") is False
    assert await repo.list_users() == []


@pytest.mark.asyncio
async def test_json_repository_persists_across_instances(tmp_path):
    path = tmp_path / "ledger.json"
    repo = JsonFileRepository(path)
    user_id = await repo.allocate_id("user")
    await repo.save_user(_user(user_id))

    snapshot = json.loads(path.read_text(encoding="utf-8"))
    assert snapshot["counters"] == {"user": 1}

    reloaded = JsonFileRepository(path)
    assert [u.id for u in await reloaded.list_users()] == ["user1"]
    assert await reloaded.allocate_id("user") == "user2"


def test_create_repository_selects_backend(tmp_path):
    assert isinstance(create_repository(Settings(storage_backend="memory")), InMemoryRepository)
    repo = create_repository(Settings(storage_backend="json", storage_path=str(tmp_path / "l.json")))
    assert isinstance(repo, JsonFileRepository)
