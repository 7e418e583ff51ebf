from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from ..errors import ValidationError
from ..recipes.models import Language, Recipe
from ..store import CandidateQuery, RatingStats
from .config import DEFAULT_RANKING_CONFIG, RankingConfig

MISSING_CRITERIA_MESSAGE = "Please provide at least a mood or two ingredients"


def validate_request(
    mood: str | None,
    ingredients: Sequence[str],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> None:
    """Reject requests that carry neither a mood nor enough ingredients."""
    if not mood and len(ingredients) < config.min_ingredients:
        raise ValidationError(MISSING_CRITERIA_MESSAGE)


def build_candidate_query(
    lang: Language,
    mood: str | None,
    ingredients: Sequence[str],
    max_cook_time: float | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> CandidateQuery:
    validate_request(mood, ingredients, config)
    constrained = len(ingredients) >= config.min_ingredients
    return CandidateQuery(
        lang=lang.value,
        mood=mood or None,
        ingredients=tuple(dict.fromkeys(ingredients)) if constrained else (),
        max_cook_time=max_cook_time,
    )


def match_score(
    recipe: Recipe,
    requested: Sequence[str],
    lang: Language,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> float:
    """Fraction of the recipe's ingredients named (in ``lang``) in ``requested``.

    Mood-only requests score 1 for every candidate; a recipe without
    ingredients scores 0.
    """
    if len(requested) < config.min_ingredients:
        return 1.0
    if not recipe.ingredients:
        return 0.0
    wanted = set(requested)
    common = sum(1 for ing in recipe.ingredients if ing.name.get(lang) in wanted)
    return common / len(recipe.ingredients)


def score_candidates(
    recipes: Sequence[Recipe],
    requested: Sequence[str],
    lang: Language,
    ratings: Mapping[str, RatingStats],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> pd.DataFrame:
    """One row per recipe with ``id``, ``match_score`` and ``avg_rating`` (0 if unreviewed)."""
    return pd.DataFrame(
        {
            "id": [r.id for r in recipes],
            "match_score": [match_score(r, requested, lang, config) for r in recipes],
            "avg_rating": [ratings[r.id].average if r.id in ratings else 0.0 for r in recipes],
        },
        columns=["id", "match_score", "avg_rating"],
    )


def rank_candidates(
    scored: pd.DataFrame,
    min_rating: float = 0.0,
    limit: int = DEFAULT_RANKING_CONFIG.result_limit,
) -> list[str]:
    """Return recipe ids ordered by match score, then average rating, then id."""
    kept = scored[scored["avg_rating"] >= min_rating]
    top = kept.sort_values(
        ["match_score", "avg_rating", "id"],
        ascending=[False, False, True],
        kind="mergesort",
    ).head(limit)
    return top["id"].tolist()


def rank_recipes(
    recipes: Sequence[Recipe],
    requested: Sequence[str],
    lang: Language,
    ratings: Mapping[str, RatingStats],
    min_rating: float = 0.0,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[Recipe]:
    if not recipes:
        return []
    scored = score_candidates(recipes, requested, lang, ratings, config)
    by_id = {r.id: r for r in recipes}
    return [by_id[rid] for rid in rank_candidates(scored, min_rating, config.result_limit)]
