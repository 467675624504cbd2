"""
Aura service.

Validates scan input, applies the eligibility gate, runs the analysis engine
and persists the resulting reading.
"""

import asyncio
import base64
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from shared.config import Settings
from shared.errors import EligibilityError, NotFoundError, ValidationError
from shared.logging import get_logger, set_request_id
from shared.models.aura import AuraReading, AuraStats, ScanEligibility

from modules.aura_analyzer.engine import AnalysisEngine
from modules.aura_analyzer.validator import (
    to_data_uri,
    validate_image_data,
    validate_image_url,
    validate_upload,
)
from api_gateway.services.eligibility import ScanEligibilityGate, start_of_utc_day
from api_gateway.services.reading_store import ReadingStore, clamp_page

logger = get_logger(__name__)


class AuraService:
    """Scan, read and aggregate a user's aura readings."""

    def __init__(
        self,
        engine: AnalysisEngine,
        store: ReadingStore,
        gate: ScanEligibilityGate,
        max_image_data_bytes: int = 3 * 1024 * 1024,
        max_upload_bytes: int = 4 * 1024 * 1024,
    ):
        self.engine = engine
        self.store = store
        self.gate = gate
        self.max_image_data_bytes = max_image_data_bytes
        self.max_upload_bytes = max_upload_bytes
        # Serializes gate check and store write per user within this process
        self._user_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @classmethod
    def from_settings(cls, settings: Settings, store: ReadingStore) -> "AuraService":
        return cls(
            engine=AnalysisEngine.from_settings(settings),
            store=store,
            gate=ScanEligibilityGate(store, settings.free_daily_scan_limit, settings.premium_users),
            max_image_data_bytes=settings.max_image_data_bytes,
            max_upload_bytes=settings.max_upload_bytes,
        )

    async def check_eligibility(self, user_id: str) -> ScanEligibility:
        is_premium = self.gate.is_premium(user_id)
        allowed, remaining = await self.gate.can_analyze(user_id, is_premium)
        return ScanEligibility(can_scan=allowed, remaining=remaining, is_subscribed=is_premium)

    def _resolve_image_ref(self, image_url: Optional[str], image_data: Optional[str]) -> Tuple[str, Optional[str]]:
        """Return (image_ref for the engine, image_url to store)."""
        image_url = (image_url or "").strip()
        image_data = (image_data or "").strip()

        if not image_url and not image_data:
            raise ValidationError("Either image_data or image_url is required")
        if image_url and image_data:
            raise ValidationError("Provide only one of image_data or image_url")

        if image_url:
            if not validate_image_url(image_url):
                raise ValidationError("image_url must be a valid HTTP/HTTPS URL")
            return image_url, image_url

        if len(image_data) > self.max_image_data_bytes:
            raise ValidationError(
                f"Image data too large. Maximum {self.max_image_data_bytes // (1024 * 1024)}MB base64."
            )
        if not validate_image_data(image_data, self.max_image_data_bytes):
            raise ValidationError("image_data must be valid base64")
        return to_data_uri(image_data), None

    async def create(
        self,
        user_id: str,
        image_url: Optional[str] = None,
        image_data: Optional[str] = None,
    ) -> AuraReading:
        """
        Run a scan from a URL or base64 payload and store the reading.

        Raises:
            ValidationError: If the image input is missing or malformed
            EligibilityError: If the user has no scans left today
        """
        image_ref, stored_url = self._resolve_image_ref(image_url, image_data)
        return await self._scan(user_id, image_ref, stored_url)

    async def create_from_upload(self, user_id: str, content: bytes, content_type: Optional[str]) -> AuraReading:
        """
        Run a scan from uploaded file bytes and store the reading.

        Only the file size limit applies here; the base64 limit is for JSON payloads.

        Raises:
            ValidationError: If the file is not a JPEG/PNG within the upload limit
            EligibilityError: If the user has no scans left today
        """
        if not validate_upload(content_type, len(content), self.max_upload_bytes):
            raise ValidationError(
                f"Only JPEG and PNG images up to {self.max_upload_bytes // (1024 * 1024)}MB are supported"
            )
        data = base64.b64encode(content).decode("ascii")
        return await self._scan(user_id, to_data_uri(data, content_type), None)

    async def _scan(self, user_id: str, image_ref: str, stored_url: Optional[str]) -> AuraReading:
        async with self._user_locks[user_id]:
            is_premium = self.gate.is_premium(user_id)
            allowed, remaining = await self.gate.can_analyze(user_id, is_premium)
            if not allowed:
                raise EligibilityError(
                    "Daily scan limit reached. Upgrade to Premium for unlimited scans.",
                    remaining=remaining,
                )

            reading_id = uuid.uuid4()
            set_request_id(str(reading_id))
            try:
                result = await self.engine.analyze(user_id, image_ref)
            finally:
                set_request_id(None)

            now = datetime.now(timezone.utc)
            reading = AuraReading(
                id=reading_id,
                user_id=user_id,
                image_url=stored_url,
                aura_color=result.aura_color,
                secondary_color=result.secondary_color,
                energy_level=result.energy_level,
                mood_score=result.mood_score,
                personality=result.personality,
                strengths=list(result.strengths),
                challenges=list(result.challenges),
                daily_advice=result.daily_advice,
                analyzed_at=now,
                created_at=now,
            )
            await self.store.create(reading)

        logger.info(
            "Aura reading created",
            extra={"reading_id": str(reading_id), "user_id": user_id, "aura_color": reading.aura_color},
        )
        return reading

    async def get(self, user_id: str, reading_id: UUID) -> AuraReading:
        reading = await self.store.get(user_id, reading_id)
        if reading is None:
            raise NotFoundError("Reading not found", reading_id=str(reading_id))
        return reading

    async def list(self, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[AuraReading], int, int, int]:
        """Return (readings, total, page, page_size) with pagination clamped."""
        page, page_size = clamp_page(page, page_size)
        readings, total = await self.store.list(user_id, page, page_size)
        return readings, total, page, page_size

    async def latest(self, user_id: str) -> AuraReading:
        reading = await self.store.latest(user_id)
        if reading is None:
            raise NotFoundError("No readings yet")
        return reading

    async def today(self, user_id: str) -> AuraReading:
        reading = await self.store.latest(user_id)
        if reading is None or reading.created_at < start_of_utc_day():
            raise NotFoundError("No reading today")
        return reading

    async def delete(self, user_id: str, reading_id: UUID) -> None:
        if not await self.store.delete(user_id, reading_id):
            raise NotFoundError("Reading not found", reading_id=str(reading_id))

    async def stats(self, user_id: str) -> AuraStats:
        return await self.store.stats(user_id)
