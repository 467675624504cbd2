"""
Trait catalog.

Static personality copy keyed by primary aura color, used to fill narrative
fields that no provider supplied.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from shared.errors import ConfigError

from .models import AURA_COLORS, DEFAULT_AURA_COLOR, TRAIT_COUNT, AnalysisResult


@dataclass(frozen=True)
class TraitEntry:
    personality: str
    strengths: Tuple[str, str, str]
    challenges: Tuple[str, str, str]
    daily_advice: str


TRAIT_CATALOG: Mapping[str, TraitEntry] = MappingProxyType({
    "red": TraitEntry(
        personality="Passionate, energetic, and action-oriented.",
        strengths=("Courage", "Leadership", "Determination"),
        challenges=("Impulsiveness", "Patience", "Anger Management"),
        daily_advice="Channel your energy into a physical activity today. Avoid hasty decisions.",
    ),
    "orange": TraitEntry(
        personality="Creative, social, and adventurous.",
        strengths=("Creativity", "Optimism", "Social Skills"),
        challenges=("Scattered Focus", "Restlessness", "Overcommitment"),
        daily_advice="Start a new creative project. Connect with an old friend.",
    ),
    "yellow": TraitEntry(
        personality="Optimistic, intellectual, and cheerful.",
        strengths=("Analytical Thinking", "Positivity", "Communication"),
        challenges=("Critical Nature", "Overthinking", "Perfectionism"),
        daily_advice="Share your ideas with others. Take time to relax your mind.",
    ),
    "green": TraitEntry(
        personality="Balanced, growth-oriented, and nurturing.",
        strengths=("Compassion", "Reliability", "Growth Mindset"),
        challenges=("Jealousy", "Possessiveness", "Insecurity"),
        daily_advice="Spend time in nature. Nurture a relationship or a plant.",
    ),
    "blue": TraitEntry(
        personality="Calm, intuitive, and trustworthy.",
        strengths=("Communication", "Intuition", "Loyalty"),
        challenges=("Fear of Expression", "Melancholy", "Stubbornness"),
        daily_advice="Speak your truth today. Trust your gut feelings.",
    ),
    "indigo": TraitEntry(
        personality="Intuitive, wise, and deeply spiritual.",
        strengths=("Vision", "Wisdom", "Integrity"),
        challenges=("Isolation", "Judgment", "Rigidity"),
        daily_advice="Meditate or reflect on your long-term goals. Practice forgiveness.",
    ),
    "violet": TraitEntry(
        personality="Visionary, artistic, and magical.",
        strengths=("Imagination", "Humanitarianism", "Leadership"),
        challenges=("Unrealistic Expectations", "Arrogance", "Detachment"),
        daily_advice="Engage in art or music. Visualize your ideal future.",
    ),
    "white": TraitEntry(
        personality="Pure, balanced, and spiritually connected.",
        strengths=("Purity", "Healing", "High Vibration"),
        challenges=("Vulnerability", "Naivety", "Disconnection from Reality"),
        daily_advice="Focus on cleansing your space, physical or mental. Protect your energy.",
    ),
    "gold": TraitEntry(
        personality="Confident, abundant, and empowered.",
        strengths=("Confidence", "Generosity", "Willpower"),
        challenges=("Ego", "Greed", "Overbearing nature"),
        daily_advice="Share your abundance with others. Practice humility.",
    ),
    "pink": TraitEntry(
        personality="Loving, gentle, and compassionate.",
        strengths=("Love", "Empathy", "Nurturing"),
        challenges=("Neediness", "Martyrdom", "Lack of Boundaries"),
        daily_advice="Practice self-love. Set healthy boundaries with kindness.",
    ),
})

def validate_catalog(catalog: Mapping[str, TraitEntry]) -> None:
    """
    Check that every aura color has a complete entry.

    Raises:
        ConfigError: If a color is missing or an entry is incomplete
    """
    missing = [color for color in AURA_COLORS if color not in catalog]
    if missing:
        raise ConfigError(f"Trait catalog has no entry for: {', '.join(missing)}")
    for color, entry in catalog.items():
        if len(entry.strengths) != TRAIT_COUNT or len(entry.challenges) != TRAIT_COUNT:
            raise ConfigError(f"Trait catalog entry for {color} must list {TRAIT_COUNT} strengths and challenges")
        if not entry.personality.strip() or not entry.daily_advice.strip():
            raise ConfigError(f"Trait catalog entry for {color} has empty copy")


validate_catalog(TRAIT_CATALOG)


def get_traits(color: str) -> TraitEntry:
    """Return the catalog entry for a color, falling back to the default color."""
    return TRAIT_CATALOG.get(color, TRAIT_CATALOG[DEFAULT_AURA_COLOR])


def apply_traits(result: AnalysisResult) -> AnalysisResult:
    """
    Fill empty narrative fields from the catalog entry of the result's color.

    Fields a provider already supplied are kept as they are.
    """
    traits = get_traits(result.aura_color)
    updates = {}
    if not result.personality.strip():
        updates["personality"] = traits.personality
    if not result.daily_advice.strip():
        updates["daily_advice"] = traits.daily_advice
    if not result.strengths:
        updates["strengths"] = traits.strengths
    if not result.challenges:
        updates["challenges"] = traits.challenges
    if not updates:
        return result
    return AnalysisResult.model_validate({**result.model_dump(), **updates})
