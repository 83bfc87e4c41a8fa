"""
Tests for CRUD operations.

This module contains tests for provider selection, user key lookup and usage
accounting against the database.
"""

import pytest
from sqlalchemy.future import select

from app.core.security import hash_for_lookup, hash_secret
from app.crud.api_provider import api_provider as provider_crud
from app.crud import usage as usage_crud
from app.crud.usage import record_generation
from app.crud.user_key import user_key as user_key_crud
from app.models.user_key import UserUsage


async def make_user(db, name="Alice", key="alice-key-1"):
    return await user_key_crud.create(
        db,
        name=name,
        key_id=hash_for_lookup(key),
        key_hash=hash_secret(key),
        plain_key=key,
    )


async def make_provider(db, name="nano", display_name="Nano Banana", is_active=True):
    return await provider_crud.create(
        db,
        name=name,
        display_name=display_name,
        model_id="gemini-2.5-flash-image",
        base_url="https://upstream.example.com",
        api_key="sk-test",
        is_active=is_active,
    )


# User key tests
@pytest.mark.asyncio
async def test_get_user_by_key_id(db):
    user = await make_user(db)

    found = await user_key_crud.get_by_key_id(db, key_id=hash_for_lookup("alice-key-1"))
    assert found is not None
    assert found.id == user.id
    assert found.usage_count == 0
    assert found.is_active is True

    assert await user_key_crud.get_by_key_id(db, key_id=hash_for_lookup("other")) is None


@pytest.mark.asyncio
async def test_list_users_newest_first(db):
    first = await make_user(db, "Alice", "a")
    second = await make_user(db, "Bob", "b")

    users = await user_key_crud.list_with_usages(db)
    assert [u.id for u in users] == [second.id, first.id]


# Provider tests
@pytest.mark.asyncio
async def test_active_providers_oldest_first(db):
    first = await make_provider(db, "nano")
    await make_provider(db, "off", is_active=False)
    third = await make_provider(db, "flux", "Flux")

    active = await provider_crud.get_active(db)
    assert [p.id for p in active] == [first.id, third.id]


@pytest.mark.asyncio
async def test_get_active_by_name_picks_newest(db):
    await make_provider(db, "nano", "Old")
    newest = await make_provider(db, "nano", "New")
    await make_provider(db, "nano", "Newest but off", is_active=False)

    selected = await provider_crud.get_active_by_name(db, name="nano")
    assert selected.id == newest.id
    assert await provider_crud.get_active_by_name(db, name="missing") is None


# Usage tests
@pytest.mark.asyncio
async def test_record_generation_creates_then_increments(db):
    user = await make_user(db)

    user = await record_generation(db, user=user, model_name="Nano Banana")
    assert user.usage_count == 1
    assert user.last_used_at is not None

    user = await record_generation(db, user=user, model_name="Nano Banana")
    user = await record_generation(db, user=user, model_name="Flux")
    assert user.usage_count == 3

    db.expire_all()
    users = await user_key_crud.list_with_usages(db)
    usages = {u.model_name: u.count for u in users[0].usages}
    assert usages == {"Flux": 1, "Nano Banana": 2}


@pytest.mark.asyncio
async def test_usage_rows_are_per_user(db):
    alice = await make_user(db, "Alice", "a")
    bob = await make_user(db, "Bob", "b")

    await record_generation(db, user=alice, model_name="Nano Banana")
    await record_generation(db, user=bob, model_name="Nano Banana")

    db.expire_all()
    for user in await user_key_crud.list_with_usages(db):
        assert [(u.model_name, u.count) for u in user.usages] == [("Nano Banana", 1)]
        assert user.usage_count == 1


@pytest.mark.asyncio
async def test_deleting_user_removes_usages(db):
    user = await make_user(db)
    await record_generation(db, user=user, model_name="Nano Banana")
    user_id = user.id

    db.expire_all()
    removed = await user_key_crud.remove(db, id=user_id)
    assert removed is not None
    assert await user_key_crud.list_with_usages(db) == []
    usages = await db.execute(select(UserUsage))
    assert usages.scalars().all() == []


@pytest.mark.asyncio
async def test_failed_usage_upsert_rolls_back_counter(db, monkeypatch):
    user = await make_user(db)

    async def failing_upsert(db, *, user_id, model_name):
        raise RuntimeError("upsert failed")

    monkeypatch.setattr(usage_crud, "_upsert_usage", failing_upsert)

    with pytest.raises(RuntimeError):
        await record_generation(db, user=user, model_name="Nano Banana")

    await db.refresh(user)
    assert user.usage_count == 0
    assert user.last_used_at is None
    usages = await db.execute(select(UserUsage))
    assert usages.scalars().all() == []
