"""
Deterministic baseline generation.

Derives a reproducible analysis from a SHA-256 digest of the image reference
and user id, so a valid result exists before any provider is called.
"""

import hashlib
from typing import Optional, Union
from uuid import UUID

from .models import AURA_COLORS, SECONDARY_COLORS, AnalysisResult

SEED_DELIMITER = ":"


def _seed_digest(user_id: Union[str, UUID], image_ref: str) -> bytes:
    seed = (image_ref or "").strip().lower() + SEED_DELIMITER + str(user_id)
    return hashlib.sha256(seed.encode("utf-8")).digest()


def generate_baseline(user_id: Union[str, UUID], image_ref: str) -> AnalysisResult:
    """
    Build the baseline analysis for a user/image pair.

    Byte layout of the digest:
        [0] primary color, [1] energy 45..95, [2] mood 5..10,
        [3] secondary color gate (1 in 4), [4] secondary color.

    Narrative fields are left empty. Identical inputs always give equal results.
    """
    digest = _seed_digest(user_id, image_ref)

    color = AURA_COLORS[digest[0] % len(AURA_COLORS)]
    energy = 45 + digest[1] % 51
    mood = 5 + digest[2] % 6

    secondary: Optional[str] = None
    if digest[3] % 4 == 0:
        candidate = SECONDARY_COLORS[digest[4] % len(SECONDARY_COLORS)]
        # A collision means no secondary color; the draw is not repeated
        if candidate != color:
            secondary = candidate

    return AnalysisResult(
        aura_color=color,
        secondary_color=secondary,
        energy_level=energy,
        mood_score=mood,
    )
