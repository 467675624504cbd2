"""
Response normalization for aura analysis.

Maps loosely typed provider output onto the strict result shape: colors are
checked against the enumerations, numbers are clamped, trait lists are cut or
padded to three entries.
"""

import math
from typing import Any, Mapping, Optional, Tuple, Union

from .models import (
    AURA_COLORS,
    ENERGY_RANGE,
    MOOD_RANGE,
    SECONDARY_COLORS,
    TRAIT_COUNT,
    AnalysisCandidate,
    AnalysisResult,
)

PLACEHOLDER_STRENGTHS: Tuple[str, ...] = ("Adaptability", "Self-Awareness", "Resilience")
PLACEHOLDER_CHALLENGES: Tuple[str, ...] = ("Patience", "Balance", "Self-Doubt")

_NULL_TOKENS = {"", "null", "none"}

CandidateLike = Union[AnalysisCandidate, Mapping[str, Any]]


def clamp(value: int, lo: int, hi: int) -> int:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def normalize_color(raw: Any) -> str:
    """Return the canonical primary color, or "" when it is not one of the ten."""
    v = raw.strip().lower() if isinstance(raw, str) else ""
    return v if v in AURA_COLORS else ""


def normalize_secondary_color(raw: Any, primary: str = "") -> Optional[str]:
    """Return the canonical secondary color, or None when absent, unknown or equal to primary."""
    if not isinstance(raw, str):
        return None
    v = raw.strip().lower()
    if v in _NULL_TOKENS or v not in SECONDARY_COLORS:
        return None
    if v == primary:
        return None
    return v


def coerce_level(raw: Any) -> int:
    """
    Read an integer level from provider output.

    Returns 0 for anything that is not a number, which callers treat as
    "not supplied". Numeric strings and floats are accepted.
    """
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, str):
        raw = raw.strip()
        try:
            raw = float(raw)
        except ValueError:
            return 0
    if isinstance(raw, float):
        if not math.isfinite(raw):
            return 0
        return int(round(raw))
    if isinstance(raw, int):
        return raw
    return 0


def normalize_energy(raw: Any) -> Optional[int]:
    level = coerce_level(raw)
    return clamp(level, *ENERGY_RANGE) if level != 0 else None


def normalize_mood(raw: Any) -> Optional[int]:
    level = coerce_level(raw)
    return clamp(level, *MOOD_RANGE) if level != 0 else None


def normalize_text(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""


def normalize_trait_list(raw: Any, placeholders: Tuple[str, ...]) -> Tuple[str, ...]:
    """
    Cut or pad a trait list to exactly three entries.

    Non-string and blank entries are dropped first. A list with no usable entry
    comes back empty so the caller can fall back to another source.
    """
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return ()
    items = [item.strip() for item in raw if isinstance(item, str) and item.strip()]
    if not items:
        return ()
    items = items[:TRAIT_COUNT]
    for filler in placeholders:
        if len(items) >= TRAIT_COUNT:
            break
        if filler not in items:
            items.append(filler)
    return tuple(items)


def clean_candidate(candidate: CandidateLike) -> AnalysisCandidate:
    """
    Normalize every field of a candidate independently.

    Unusable fields become None, so the result tells exactly which fields a
    provider supplied. An invalid primary color also becomes None; rejecting
    the candidate for it is up to the caller.
    """
    if not isinstance(candidate, AnalysisCandidate):
        candidate = AnalysisCandidate.model_validate(dict(candidate))

    color = normalize_color(candidate.aura_color)
    strengths = normalize_trait_list(candidate.strengths, PLACEHOLDER_STRENGTHS)
    challenges = normalize_trait_list(candidate.challenges, PLACEHOLDER_CHALLENGES)
    return AnalysisCandidate(
        aura_color=color or None,
        secondary_color=normalize_secondary_color(candidate.secondary_color, color),
        energy_level=normalize_energy(candidate.energy_level),
        mood_score=normalize_mood(candidate.mood_score),
        personality=normalize_text(candidate.personality) or None,
        strengths=strengths or None,
        challenges=challenges or None,
        daily_advice=normalize_text(candidate.daily_advice) or None,
    )


def normalize(candidate: CandidateLike) -> Tuple[Optional[AnalysisResult], bool]:
    """
    Validate and clamp a candidate into an AnalysisResult.

    Returns (None, False) when the primary color is not recognized. Everything
    else is repaired: numbers are clamped, unknown secondary colors dropped,
    trait lists cut or padded. Empty narrative fields stay empty.
    """
    cleaned = clean_candidate(candidate)
    if cleaned.aura_color is None:
        return None, False

    result = AnalysisResult(
        aura_color=cleaned.aura_color,
        secondary_color=cleaned.secondary_color,
        energy_level=cleaned.energy_level or ENERGY_RANGE[0],
        mood_score=cleaned.mood_score or MOOD_RANGE[0],
        personality=cleaned.personality or "",
        strengths=cleaned.strengths or (),
        challenges=cleaned.challenges or (),
        daily_advice=cleaned.daily_advice or "",
    )
    return result, True
