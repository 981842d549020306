"""
Tests for the order repository.
"""
from datetime import datetime, timedelta, timezone

import pytest

from order_sync.core.exceptions import OrderConflictError
from order_sync.repositories.order import OrderRepository


def order_fields(order_id: str, user_id: str = "U1", **overrides) -> dict:
    now = datetime.now(timezone.utc)
    fields = {
        "id": order_id,
        "user_id": user_id,
        "items": [],
        "items_count": 0,
        "total": 1000,
        "status": "pending",
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return fields


async def test_create_and_read(db_session):
    repo = OrderRepository(db_session)
    await repo.create(order_fields("O1"))
    await repo.commit()

    order = await repo.get_by_id("O1")

    assert order is not None
    assert order.user_id == "U1"
    assert order.gateway == "ngenius"
    assert order.payment_method == "card"
    assert order.version == 1


async def test_get_missing_returns_none(db_session):
    assert await OrderRepository(db_session).get_by_id("nope") is None


async def test_list_for_user_newest_first(db_session):
    repo = OrderRepository(db_session)
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    await repo.create(order_fields("old", created_at=base))
    await repo.create(order_fields("new", created_at=base + timedelta(hours=2)))
    await repo.create(order_fields("mid", created_at=base + timedelta(hours=1)))
    await repo.create(order_fields("other", user_id="U2", created_at=base))
    await repo.commit()

    orders = await repo.list_for_user("U1")

    assert [order.id for order in orders] == ["new", "mid", "old"]


async def test_duplicate_create_is_a_conflict(session_factory):
    async with session_factory() as first, session_factory() as second:
        repo_a = OrderRepository(first)
        await repo_a.create(order_fields("O1"))
        await repo_a.commit()

        with pytest.raises(OrderConflictError):
            await OrderRepository(second).create(order_fields("O1"))


async def test_stale_update_is_a_conflict(session_factory):
    """A read-modify-write based on an outdated read is refused."""
    async with session_factory() as first, session_factory() as second:
        repo_a = OrderRepository(first)
        repo_b = OrderRepository(second)
        await repo_a.create(order_fields("O1"))
        await repo_a.commit()

        stale = await repo_a.get_by_id("O1")
        fresh = await repo_b.get_by_id("O1")
        await repo_b.update(fresh, {"promo_code": "WINTER"})
        await repo_b.commit()

        with pytest.raises(OrderConflictError):
            await repo_a.update(stale, {"promo_code": "SUMMER"})

        current = await repo_b.get_by_id("O1")
        assert current.promo_code == "WINTER"
        assert current.version == 2
