"""
Scan eligibility.

Free users get a fixed number of scans per UTC day, counted from stored
readings. Premium users are unlimited.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from shared.logging import get_logger

from api_gateway.services.reading_store import ReadingStore

logger = get_logger(__name__)

UNLIMITED = -1


def start_of_utc_day(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


class ScanEligibilityGate:
    """Answers can_analyze before any provider call is attempted."""

    def __init__(self, store: ReadingStore, daily_limit: int, premium_user_ids: Iterable[str] = ()):
        self.store = store
        self.daily_limit = daily_limit
        self._premium = frozenset(premium_user_ids)

    def is_premium(self, user_id: str) -> bool:
        return user_id in self._premium

    async def can_analyze(self, user_id: str, is_premium: bool) -> Tuple[bool, int]:
        """
        Return (allowed, remaining) for today.

        remaining is -1 for premium users.
        """
        if is_premium:
            return True, UNLIMITED

        used = await self.store.count_since(user_id, start_of_utc_day())
        remaining = max(0, self.daily_limit - used)
        if remaining == 0:
            logger.info("Daily scan limit reached", extra={"user_id": user_id, "used": used})
        return remaining > 0, remaining
