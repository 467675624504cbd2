"""
Provider configuration for aura analysis.

Turns application settings into the ordered provider list. Providers without
a credential are left out here, never skipped at call time.
"""

from typing import Callable, Dict, List

from shared.config import Settings
from shared.logging import get_logger

from .models import ProviderSpec

logger = get_logger("aura_analyzer")


def _glm(settings: Settings) -> ProviderSpec:
    return ProviderSpec(
        name="glm",
        endpoint_url=settings.glm_api_url,
        credential=settings.glm_api_key.strip(),
        model=settings.glm_model.strip(),
    )


def _deepseek(settings: Settings) -> ProviderSpec:
    return ProviderSpec(
        name="deepseek",
        endpoint_url=settings.deepseek_api_url,
        credential=settings.deepseek_api_key.strip(),
        model=settings.deepseek_model.strip(),
    )


def _openai(settings: Settings) -> ProviderSpec:
    return ProviderSpec(
        name="openai",
        endpoint_url=settings.openai_api_url,
        credential=settings.openai_api_key.strip(),
        model=settings.openai_model.strip(),
        supports_vision=True,
    )


KNOWN_PROVIDERS: Dict[str, Callable[[Settings], ProviderSpec]] = {
    "glm": _glm,
    "deepseek": _deepseek,
    "openai": _openai,
}


def build_provider_specs(settings: Settings) -> List[ProviderSpec]:
    """Return configured providers in priority order, skipping those without a credential."""
    specs: List[ProviderSpec] = []
    seen = set()
    for name in settings.provider_order:
        factory = KNOWN_PROVIDERS.get(name)
        if factory is None:
            logger.warning("Unknown aura provider in AURA_PROVIDER_ORDER", extra={"provider": name})
            continue
        if name in seen:
            continue
        seen.add(name)
        spec = factory(settings)
        if not spec.credential:
            continue
        specs.append(spec)

    logger.info(
        "Aura providers configured",
        extra={"providers": ",".join(s.name for s in specs) or "none"},
    )
    return specs
