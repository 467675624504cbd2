"""
Aura reading data models.

Defines the persisted AuraReading record and the list/stats/eligibility
response shapes built from it.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer


class AuraReading(BaseModel):
    """A stored aura analysis owned by one user."""

    id: UUID
    user_id: str
    image_url: Optional[str] = None
    aura_color: str
    secondary_color: Optional[str] = None
    energy_level: int = Field(ge=1, le=100)
    mood_score: int = Field(ge=1, le=10)
    personality: str
    strengths: List[str]
    challenges: List[str]
    daily_advice: str
    analyzed_at: datetime
    created_at: datetime

    @field_serializer("id")
    def serialize_uuid(self, value: UUID) -> str:
        """Serialize UUID to string."""
        return str(value)

    @field_serializer("analyzed_at", "created_at")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Serialize datetime to ISO format string."""
        return value.isoformat() if value else None


class AuraReadingPage(BaseModel):
    """One page of a user's readings, newest first."""

    data: List[AuraReading] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int


class AuraStats(BaseModel):
    """Aggregate statistics over a user's readings."""

    color_distribution: Dict[str, int] = Field(default_factory=dict)
    total_readings: int = 0
    average_energy: float = 0.0
    average_mood: float = 0.0


class ScanEligibility(BaseModel):
    """Whether a user may start another scan today."""

    can_scan: bool
    remaining: int = Field(description="Scans left today, -1 for unlimited")
    is_subscribed: bool = False
