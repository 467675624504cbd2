"""
Provider orchestration.

Tries providers in priority order and lays the first usable answer over the
deterministic baseline. Provider failures never reach the caller.
"""

from typing import Any, Dict, Optional, Sequence, Tuple

from shared.logging import get_logger

from .errors import ProviderError
from .models import DEFAULT_AURA_COLOR, AnalysisResult
from .normalizer import CandidateLike, clean_candidate, normalize_color, normalize_secondary_color
from .provider import ProviderClient

logger = get_logger("aura_analyzer")


def merge(base: AnalysisResult, incoming: CandidateLike) -> AnalysisResult:
    """
    Field-level override of the baseline by a candidate.

    A candidate field wins only when it carries a usable value: empty strings,
    zero levels and unknown colors keep the baseline value. Levels are clamped
    rather than dropped.
    """
    cleaned = clean_candidate(incoming)
    fields: Dict[str, Any] = base.model_dump()

    for name in (
        "aura_color", "secondary_color", "energy_level", "mood_score",
        "personality", "strengths", "challenges", "daily_advice",
    ):
        value = getattr(cleaned, name)
        if value is not None:
            fields[name] = value

    if not normalize_color(fields["aura_color"]):
        fields["aura_color"] = DEFAULT_AURA_COLOR
    # The primary may have come from a different source than the secondary
    fields["secondary_color"] = normalize_secondary_color(fields["secondary_color"], fields["aura_color"])

    return AnalysisResult.model_validate(fields)


class ProviderOrchestrator:
    """Ordered fallback over provider clients. First good answer wins."""

    def __init__(self, providers: Optional[Sequence[ProviderClient]] = None):
        self._providers: Tuple[ProviderClient, ...] = tuple(providers or ())

    @property
    def providers(self) -> Tuple[ProviderClient, ...]:
        return self._providers

    async def enrich(self, image_ref: str, baseline: AnalysisResult) -> AnalysisResult:
        """
        Return the baseline enriched by the first provider that succeeds.

        Returns the baseline unchanged when no provider is configured or all fail.
        """
        if not self._providers:
            logger.debug("No aura providers configured, using baseline")
            return baseline

        for provider in self._providers:
            try:
                candidate = await provider.call(image_ref, baseline)
            except ProviderError as e:
                logger.warning(
                    "Aura provider failed, trying next",
                    extra={
                        "provider": e.provider,
                        "error_type": type(e).__name__,
                        "status_code": e.status_code,
                        "error": e.message,
                    },
                )
                continue
            except Exception:
                logger.error(
                    "Unexpected error from aura provider, trying next",
                    extra={"provider": provider.name},
                    exc_info=True,
                )
                continue

            merged = merge(baseline, candidate)
            logger.info(
                "Aura analysis enriched by provider",
                extra={"provider": provider.name, "aura_color": merged.aura_color},
            )
            return merged

        logger.info(
            "All aura providers failed, using baseline",
            extra={"providers": ",".join(p.name for p in self._providers)},
        )
        return baseline
