from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RankingConfig:
    result_limit: int = 10
    mood_suggestion_limit: int = 5
    mood_lookup_limit: int = 10
    min_ingredients: int = 2


DEFAULT_RANKING_CONFIG = RankingConfig()
