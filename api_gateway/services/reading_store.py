"""
Aura reading storage.

Persistence interface the aura service depends on, with a Supabase-backed
store for deployments and an in-memory store for development and tests.
Readings are returned per user, newest first.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Tuple
from uuid import UUID

from shared.database import DatabaseClient
from shared.logging import get_logger
from shared.models.aura import AuraReading, AuraStats

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


class ReadingStore(Protocol):
    async def create(self, reading: AuraReading) -> AuraReading: ...

    async def get(self, user_id: str, reading_id: UUID) -> Optional[AuraReading]: ...

    async def list(self, user_id: str, page: int, page_size: int) -> Tuple[List[AuraReading], int]: ...

    async def latest(self, user_id: str) -> Optional[AuraReading]: ...

    async def count_since(self, user_id: str, since: datetime) -> int: ...

    async def delete(self, user_id: str, reading_id: UUID) -> bool: ...

    async def stats(self, user_id: str) -> AuraStats: ...


def clamp_page(page: int, page_size: int) -> Tuple[int, int]:
    """Clamp pagination arguments to page >= 1 and 1 <= page_size <= 100."""
    page = max(1, page)
    page_size = min(max(1, page_size), MAX_PAGE_SIZE)
    return page, page_size


class InMemoryReadingStore:
    """Process-local ReadingStore. Suitable for a single worker and for tests."""

    def __init__(self) -> None:
        self._readings: Dict[str, List[AuraReading]] = defaultdict(list)

    async def create(self, reading: AuraReading) -> AuraReading:
        # Newest first
        self._readings[reading.user_id].insert(0, reading)
        return reading

    async def get(self, user_id: str, reading_id: UUID) -> Optional[AuraReading]:
        for reading in self._readings.get(user_id, []):
            if reading.id == reading_id:
                return reading
        return None

    async def list(self, user_id: str, page: int, page_size: int) -> Tuple[List[AuraReading], int]:
        page, page_size = clamp_page(page, page_size)
        readings = self._readings.get(user_id, [])
        offset = (page - 1) * page_size
        return readings[offset:offset + page_size], len(readings)

    async def latest(self, user_id: str) -> Optional[AuraReading]:
        readings = self._readings.get(user_id, [])
        return readings[0] if readings else None

    async def count_since(self, user_id: str, since: datetime) -> int:
        return sum(1 for r in self._readings.get(user_id, []) if r.created_at >= since)

    async def delete(self, user_id: str, reading_id: UUID) -> bool:
        readings = self._readings.get(user_id, [])
        for idx, reading in enumerate(readings):
            if reading.id == reading_id:
                del readings[idx]
                return True
        return False

    async def stats(self, user_id: str) -> AuraStats:
        return build_stats(self._readings.get(user_id, []))


def build_stats(readings: List[Any]) -> AuraStats:
    """Aggregate readings (models or row dicts) into color counts and averages."""
    if not readings:
        return AuraStats()

    def _field(r: Any, name: str) -> Any:
        return r[name] if isinstance(r, dict) else getattr(r, name)

    distribution: Dict[str, int] = {}
    for r in readings:
        color = _field(r, "aura_color")
        distribution[color] = distribution.get(color, 0) + 1

    total = len(readings)
    return AuraStats(
        color_distribution=distribution,
        total_readings=total,
        average_energy=sum(_field(r, "energy_level") for r in readings) / total,
        average_mood=sum(_field(r, "mood_score") for r in readings) / total,
    )


class SupabaseReadingStore:
    """
    ReadingStore over a Supabase table. Shared by every worker.

    The table holds one row per reading with the AuraReading columns:
    id (uuid), user_id, image_url, aura_color, secondary_color, energy_level,
    mood_score, personality, strengths and challenges (text arrays),
    daily_advice, analyzed_at and created_at (timestamptz).
    """

    def __init__(self, db_client: DatabaseClient, table_name: str = "aura_readings"):
        self.db = db_client
        self.table_name = table_name

    def _table(self):
        return self.db.table(self.table_name)

    async def create(self, reading: AuraReading) -> AuraReading:
        await self._table().insert(reading.model_dump(mode="json")).execute()
        logger.debug("Stored aura reading", extra={"reading_id": str(reading.id), "user_id": reading.user_id})
        return reading

    async def get(self, user_id: str, reading_id: UUID) -> Optional[AuraReading]:
        result = await (
            self._table().select("*").eq("id", str(reading_id)).eq("user_id", user_id).limit(1).execute()
        )
        return AuraReading.model_validate(result.data[0]) if result.data else None

    async def list(self, user_id: str, page: int, page_size: int) -> Tuple[List[AuraReading], int]:
        page, page_size = clamp_page(page, page_size)
        offset = (page - 1) * page_size
        result = await (
            self._table()
            .select("*", count="exact")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(offset, offset + page_size - 1)
            .execute()
        )
        readings = [AuraReading.model_validate(row) for row in result.data or []]
        total = result.count if result.count is not None else len(readings)
        return readings, total

    async def latest(self, user_id: str) -> Optional[AuraReading]:
        result = await (
            self._table().select("*").eq("user_id", user_id).order("created_at", desc=True).limit(1).execute()
        )
        return AuraReading.model_validate(result.data[0]) if result.data else None

    async def count_since(self, user_id: str, since: datetime) -> int:
        result = await (
            self._table()
            .select("id", count="exact")
            .eq("user_id", user_id)
            .gte("created_at", since.isoformat())
            .execute()
        )
        return result.count if result.count is not None else len(result.data or [])

    async def delete(self, user_id: str, reading_id: UUID) -> bool:
        result = await self._table().delete().eq("id", str(reading_id)).eq("user_id", user_id).execute()
        return bool(result.data)

    async def stats(self, user_id: str) -> AuraStats:
        result = await (
            self._table().select("aura_color,energy_level,mood_score").eq("user_id", user_id).execute()
        )
        return build_stats(result.data or [])
