"""
Tests for the daily scan eligibility gate.
"""

from datetime import datetime, timedelta, timezone

import pytest

from api_gateway.services.eligibility import UNLIMITED, ScanEligibilityGate, start_of_utc_day


def test_start_of_utc_day():
    now = datetime(2026, 3, 4, 17, 45, 12, 999, tzinfo=timezone.utc)
    assert start_of_utc_day(now) == datetime(2026, 3, 4, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_free_user_gets_daily_limit(store, reading_factory):
    gate = ScanEligibilityGate(store, daily_limit=2)

    assert await gate.can_analyze("u", False) == (True, 2)
    await store.create(reading_factory(user_id="u"))
    assert await gate.can_analyze("u", False) == (True, 1)
    await store.create(reading_factory(user_id="u"))
    assert await gate.can_analyze("u", False) == (False, 0)


@pytest.mark.asyncio
async def test_yesterdays_scans_do_not_count(store, reading_factory):
    gate = ScanEligibilityGate(store, daily_limit=2)
    yesterday = start_of_utc_day() - timedelta(minutes=1)
    for _ in range(3):
        await store.create(reading_factory(user_id="u", created_at=yesterday))

    assert await gate.can_analyze("u", False) == (True, 2)


@pytest.mark.asyncio
async def test_premium_is_unlimited(store, reading_factory):
    gate = ScanEligibilityGate(store, daily_limit=2, premium_user_ids=["vip"])
    for _ in range(5):
        await store.create(reading_factory(user_id="vip"))

    assert gate.is_premium("vip")
    assert not gate.is_premium("u")
    assert await gate.can_analyze("vip", True) == (True, UNLIMITED)


@pytest.mark.asyncio
async def test_zero_limit_blocks_free_users(store):
    gate = ScanEligibilityGate(store, daily_limit=0)
    assert await gate.can_analyze("u", False) == (False, 0)
