from __future__ import annotations

import logging

from ..errors import NotFoundError
from ..models import total_pages
from ..reviews.service import reviews_for_recipe
from ..store import get_store
from .models import (
    Language,
    Recipe,
    RecipeCreate,
    RecipeDetail,
    RecipePage,
    RecipeUpdate,
    RecipeWithReviews,
)

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = frozenset({"cookTime", "difficulty"})


def _get_doc(recipe_id: str) -> dict:
    doc = get_store().recipes.get(recipe_id)
    if doc is None:
        raise NotFoundError("Recipe not found!")
    return doc


def create_recipe(body: RecipeCreate, user_id: str) -> Recipe:
    doc = body.model_dump(by_alias=True, mode="json")
    doc["userId"] = user_id
    stored = get_store().recipes.insert(doc)
    logger.info("Recipe %s created by %s", stored["id"], user_id)
    return Recipe.model_validate(stored)


def update_recipe(recipe_id: str, body: RecipeUpdate) -> Recipe:
    """Apply the fields present in ``body``; only nullable fields may be cleared."""
    _get_doc(recipe_id)
    fields = {
        key: value
        for key, value in body.model_dump(by_alias=True, mode="json", exclude_unset=True).items()
        if value is not None or key in _NULLABLE_FIELDS
    }
    updated = get_store().recipes.update(recipe_id, fields)
    if updated is None:
        raise NotFoundError("Recipe not found!")
    return Recipe.model_validate(updated)


def delete_recipe(recipe_id: str) -> None:
    """Delete a recipe together with its reviews."""
    store = get_store()
    if not store.recipes.delete(recipe_id):
        raise NotFoundError("Recipe not found!")
    removed = store.reviews.delete_for_recipe(recipe_id)
    logger.info("Recipe %s deleted (%d reviews removed)", recipe_id, removed)


def get_recipe(recipe_id: str) -> RecipeDetail:
    """Recipe with a live rating aggregate over its reviews."""
    doc = _get_doc(recipe_id)
    stats = get_store().reviews.rating_stats([recipe_id]).get(recipe_id)
    doc["averageRating"] = stats.average if stats else None
    doc["totalReviews"] = stats.count if stats else 0
    return RecipeDetail.model_validate(doc)


def get_recipe_with_reviews(recipe_id: str) -> RecipeWithReviews:
    detail = get_recipe(recipe_id)
    return RecipeWithReviews(
        **detail.model_dump(),
        reviews=reviews_for_recipe(recipe_id),
    )


def list_recipes(
    lang: Language,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    mood: str | None = None,
) -> RecipePage:
    docs, total = get_store().recipes.search(
        lang.value, search, mood or None, (page - 1) * limit, limit,
    )
    return RecipePage(
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
        recipes=[Recipe.model_validate(d) for d in docs],
    )
