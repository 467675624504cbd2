"""
Pytest fixtures for API gateway tests.
"""

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from shared.models.aura import AuraReading

from modules.aura_analyzer.engine import AnalysisEngine
from api_gateway.dependencies import get_aura_service, get_current_user
from api_gateway.main import app
from api_gateway.services.aura_service import AuraService
from api_gateway.services.eligibility import ScanEligibilityGate
from api_gateway.services.reading_store import InMemoryReadingStore

TEST_USER_ID = "00000000-0000-0000-0000-000000000001"
PREMIUM_USER_ID = "00000000-0000-0000-0000-0000000000ff"


def make_reading(user_id=TEST_USER_ID, aura_color="blue", energy_level=50, mood_score=5, created_at=None):
    created_at = created_at or datetime.now(timezone.utc)
    return AuraReading(
        id=uuid.uuid4(),
        user_id=user_id,
        image_url="https://x/y.jpg",
        aura_color=aura_color,
        energy_level=energy_level,
        mood_score=mood_score,
        personality="Calm.",
        strengths=["a", "b", "c"],
        challenges=["x", "y", "z"],
        daily_advice="Breathe.",
        analyzed_at=created_at,
        created_at=created_at,
    )


@pytest.fixture()
def store():
    return InMemoryReadingStore()


@pytest.fixture()
def aura_service(store):
    """Service with no providers configured, so every scan uses the baseline."""
    return AuraService(
        engine=AnalysisEngine(),
        store=store,
        gate=ScanEligibilityGate(store, daily_limit=2, premium_user_ids={PREMIUM_USER_ID}),
        max_image_data_bytes=1024,
    )


@pytest.fixture()
def current_user():
    return {"user_id": TEST_USER_ID, "email": "user@example.com"}


@pytest.fixture()
def client(aura_service, current_user):
    """Test client with auth and service dependencies overridden."""

    async def _mock_get_current_user():
        return current_user

    app.dependency_overrides[get_current_user] = _mock_get_current_user
    app.dependency_overrides[get_aura_service] = lambda: aura_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def reading_factory():
    return make_reading
