from __future__ import annotations

import logging

from ..errors import ValidationError
from ..recipes.models import (
    Language,
    Mood,
    MoodSuggestionResponse,
    Recipe,
    SmartSuggestionRequest,
)
from ..store import get_store
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .moods import tags_for_mood
from .ranking import build_candidate_query, rank_recipes

logger = logging.getLogger(__name__)


def smart_suggestions(
    request: SmartSuggestionRequest,
    lang: Language,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[Recipe]:
    query = build_candidate_query(
        lang, request.mood, request.ingredients, request.max_cook_time, config,
    )

    store = get_store()
    candidates = [Recipe.model_validate(doc) for doc in store.recipes.find_candidates(query)]
    if not candidates:
        return []

    ratings = store.reviews.rating_stats([r.id for r in candidates])
    ranked = rank_recipes(
        candidates, request.ingredients, lang, ratings, request.min_rating, config,
    )
    logger.debug(
        "Smart suggestions: %d candidates, %d returned (lang=%s)",
        len(candidates), len(ranked), lang.value,
    )
    return ranked


def mood_suggestions(
    mood: str | None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> MoodSuggestionResponse:
    """Recipes whose tags intersect the mood's descriptive tags."""
    tags = tags_for_mood(mood)
    if tags is None:
        raise ValidationError("Invalid or missing mood")
    docs = get_store().recipes.find_by_tags(tags, config.mood_suggestion_limit)
    return MoodSuggestionResponse(
        mood=Mood(mood),
        recipes=[Recipe.model_validate(doc) for doc in docs],
    )


def recipes_by_mood(
    mood: str,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[Recipe]:
    docs = get_store().recipes.find_by_mood(mood, config.mood_lookup_limit)
    return [Recipe.model_validate(doc) for doc in docs]
