from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..recipes.models import Mood

MOOD_TAGS: Mapping[Mood, tuple[str, ...]] = MappingProxyType({
    Mood.hungry: ("hearty", "filling", "carbs"),
    Mood.sad: ("comfort", "homemade", "sweet"),
    Mood.stressed: ("soothing", "warm", "light"),
    Mood.tired: ("energy", "fast", "high-protein"),
    Mood.relaxed: ("healthy", "balanced", "vegetarian"),
    Mood.happy: ("fun", "colorful", "creative"),
    Mood.bored: ("snacks", "crispy", "easy"),
    Mood.romantic: ("elegant", "shared", "gourmet"),
    Mood.anxious: ("calming", "soups", "warm"),
    Mood.energetic: ("light", "refreshing", "on-the-go"),
})


def tags_for_mood(mood: str | None) -> tuple[str, ...] | None:
    """Return the descriptive tags for ``mood``, or ``None`` if it is not a known mood."""
    if not mood:
        return None
    try:
        return MOOD_TAGS[Mood(mood)]
    except ValueError:
        return None
