"""
Pydantic models for aura analysis results, provider candidates and provider config.
"""

from typing import Any, Literal, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


AuraColor = Literal[
    "red", "orange", "yellow", "green", "blue", "indigo", "violet", "white", "gold", "pink"
]
SecondaryColor = Literal["silver", "gold", "white", "black", "grey"]

# Order matters: baseline draws index into these tuples.
AURA_COLORS: Tuple[str, ...] = (
    "red", "orange", "yellow", "green", "blue", "indigo", "violet", "white", "gold", "pink",
)
SECONDARY_COLORS: Tuple[str, ...] = ("silver", "gold", "white", "black", "grey")
DEFAULT_AURA_COLOR = "violet"

ENERGY_RANGE = (1, 100)
MOOD_RANGE = (1, 10)
TRAIT_COUNT = 3


class AnalysisResult(BaseModel):
    """Validated aura analysis. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    aura_color: AuraColor
    secondary_color: Optional[SecondaryColor] = None
    energy_level: int = Field(ge=ENERGY_RANGE[0], le=ENERGY_RANGE[1])
    mood_score: int = Field(ge=MOOD_RANGE[0], le=MOOD_RANGE[1])
    personality: str = ""
    strengths: Tuple[str, ...] = ()
    challenges: Tuple[str, ...] = ()
    daily_advice: str = ""

    @model_validator(mode="after")
    def check_invariants(self) -> "AnalysisResult":
        if self.secondary_color is not None and self.secondary_color == self.aura_color:
            raise ValueError("secondary_color must differ from aura_color")
        for field_name in ("strengths", "challenges"):
            values = getattr(self, field_name)
            # Empty means "not filled yet"; the engine always fills before returning
            if len(values) not in (0, TRAIT_COUNT):
                raise ValueError(f"{field_name} must hold exactly {TRAIT_COUNT} entries")
            if any(not v.strip() for v in values):
                raise ValueError(f"{field_name} entries must be non-empty")
        return self

    @property
    def is_complete(self) -> bool:
        """True when every narrative field is populated."""
        return bool(
            self.personality.strip()
            and self.daily_advice.strip()
            and len(self.strengths) == TRAIT_COUNT
            and len(self.challenges) == TRAIT_COUNT
        )


class AnalysisCandidate(BaseModel):
    """
    Best-effort decoded provider output.

    Every field is optional and loosely typed; whether a value is usable is
    decided by the normalizer, never by decoding.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    aura_color: Any = Field(
        default=None, validation_alias=AliasChoices("aura_color", "auraColor", "color", "primary_color")
    )
    secondary_color: Any = Field(
        default=None, validation_alias=AliasChoices("secondary_color", "secondaryColor")
    )
    energy_level: Any = Field(
        default=None, validation_alias=AliasChoices("energy_level", "energyLevel", "energy")
    )
    mood_score: Any = Field(default=None, validation_alias=AliasChoices("mood_score", "moodScore", "mood"))
    personality: Any = None
    strengths: Any = None
    challenges: Any = None
    daily_advice: Any = Field(
        default=None, validation_alias=AliasChoices("daily_advice", "dailyAdvice", "advice")
    )


class ProviderSpec(BaseModel):
    """Configuration of one chat-completions endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint_url: str
    credential: str = Field(repr=False)
    model: str
    supports_vision: bool = False
    supports_json_mode: bool = True
