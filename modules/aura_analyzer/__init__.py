"""
Aura Analyzer module.

Turns a photo reference into a bounded aura reading: deterministic baseline,
ordered LLM provider fallback, response normalization and trait fill.
"""

from .baseline import generate_baseline
from .engine import AnalysisEngine, analyze_aura_image, get_default_engine
from .models import AnalysisCandidate, AnalysisResult, ProviderSpec
from .normalizer import normalize
from .orchestrator import ProviderOrchestrator, merge
from .provider import ProviderClient
from .traits import TRAIT_CATALOG, TraitEntry

__all__ = [
    "AnalysisCandidate",
    "AnalysisEngine",
    "AnalysisResult",
    "ProviderClient",
    "ProviderOrchestrator",
    "ProviderSpec",
    "TRAIT_CATALOG",
    "TraitEntry",
    "analyze_aura_image",
    "generate_baseline",
    "get_default_engine",
    "merge",
    "normalize",
]
