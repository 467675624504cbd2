"""
Aura analysis engine.

Public entry point: deterministic baseline, then best-effort provider
enrichment, then narrative fill from the trait catalog.
"""

from typing import Optional, Sequence, Union
from uuid import UUID

import httpx

from shared.config import Settings
from shared.config import settings as app_settings
from shared.logging import get_logger

from .baseline import generate_baseline
from .config import build_provider_specs
from .models import AnalysisResult
from .orchestrator import ProviderOrchestrator
from .provider import ProviderClient
from .traits import apply_traits

logger = get_logger("aura_analyzer")

_default_engine: Optional["AnalysisEngine"] = None


class AnalysisEngine:
    """Combines baseline, orchestrator and trait catalog. Safe to share between requests."""

    def __init__(self, orchestrator: Optional[ProviderOrchestrator] = None):
        self.orchestrator = orchestrator or ProviderOrchestrator()

    @classmethod
    def from_providers(
        cls,
        providers: Sequence[ProviderClient],
    ) -> "AnalysisEngine":
        return cls(ProviderOrchestrator(providers))

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "AnalysisEngine":
        """Build an engine with every credentialed provider from settings."""
        clients = [
            ProviderClient(
                spec,
                timeout=settings.aura_ai_timeout,
                rate_limit_backoff=settings.aura_ai_rate_limit_backoff,
                http_client=http_client,
            )
            for spec in build_provider_specs(settings)
        ]
        return cls.from_providers(clients)

    async def analyze(self, user_id: Union[str, UUID], image_ref: str) -> AnalysisResult:
        """
        Produce a complete analysis for a user's image.

        Never fails on provider trouble: with no provider answering, the result
        is the deterministic baseline with catalog copy for its color.
        """
        baseline = generate_baseline(user_id, image_ref)
        enriched = await self.orchestrator.enrich(image_ref, baseline)
        result = apply_traits(enriched)

        logger.info(
            "Aura analysis completed",
            extra={
                "user_id": str(user_id),
                "aura_color": result.aura_color,
                "energy_level": result.energy_level,
                "mood_score": result.mood_score,
                "enriched": enriched is not baseline,
            },
        )
        return result


def get_default_engine() -> AnalysisEngine:
    """Return the process-wide engine built from application settings."""
    global _default_engine
    if _default_engine is None:
        _default_engine = AnalysisEngine.from_settings(app_settings)
    return _default_engine


async def analyze_aura_image(user_id: Union[str, UUID], image_ref: str) -> AnalysisResult:
    """Analyze with the default engine."""
    return await get_default_engine().analyze(user_id, image_ref)
