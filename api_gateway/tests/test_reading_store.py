"""
Tests for the in-memory reading store.
"""

from datetime import datetime, timedelta, timezone

import pytest

from api_gateway.services.reading_store import clamp_page


@pytest.mark.parametrize("page,page_size,expected", [
    (1, 20, (1, 20)),
    (0, 20, (1, 20)),
    (-4, 0, (1, 1)),
    (3, 500, (3, 100)),
])
def test_clamp_page(page, page_size, expected):
    assert clamp_page(page, page_size) == expected


@pytest.mark.asyncio
async def test_list_is_newest_first_and_paginated(store, reading_factory):
    readings = [reading_factory(energy_level=10 + i) for i in range(5)]
    for r in readings:
        await store.create(r)

    page_one, total = await store.list(readings[0].user_id, 1, 2)
    page_three, _ = await store.list(readings[0].user_id, 3, 2)

    assert total == 5
    assert [r.id for r in page_one] == [readings[4].id, readings[3].id]
    assert [r.id for r in page_three] == [readings[0].id]


@pytest.mark.asyncio
async def test_readings_are_scoped_to_user(store, reading_factory):
    mine = await store.create(reading_factory(user_id="me"))
    await store.create(reading_factory(user_id="other"))

    assert await store.get("other", mine.id) is None
    assert await store.get("me", mine.id) == mine
    assert not await store.delete("other", mine.id)
    assert (await store.list("me", 1, 20))[1] == 1


@pytest.mark.asyncio
async def test_delete_and_latest(store, reading_factory):
    first = await store.create(reading_factory())
    second = await store.create(reading_factory())

    assert await store.latest(first.user_id) == second
    assert await store.delete(first.user_id, second.id)
    assert await store.latest(first.user_id) == first
    assert not await store.delete(first.user_id, second.id)


@pytest.mark.asyncio
async def test_count_since(store, reading_factory):
    now = datetime.now(timezone.utc)
    await store.create(reading_factory(user_id="u", created_at=now - timedelta(days=1)))
    await store.create(reading_factory(user_id="u", created_at=now))

    assert await store.count_since("u", now - timedelta(hours=1)) == 1
    assert await store.count_since("nobody", now) == 0


@pytest.mark.asyncio
async def test_stats(store, reading_factory):
    await store.create(reading_factory(user_id="u", aura_color="blue", energy_level=40, mood_score=4))
    await store.create(reading_factory(user_id="u", aura_color="blue", energy_level=60, mood_score=8))
    await store.create(reading_factory(user_id="u", aura_color="gold", energy_level=80, mood_score=6))

    stats = await store.stats("u")

    assert stats.total_readings == 3
    assert stats.color_distribution == {"blue": 2, "gold": 1}
    assert stats.average_energy == pytest.approx(60.0)
    assert stats.average_mood == pytest.approx(6.0)


@pytest.mark.asyncio
async def test_stats_without_readings(store):
    stats = await store.stats("u")
    assert stats.total_readings == 0
    assert stats.color_distribution == {}
    assert stats.average_energy == 0.0
