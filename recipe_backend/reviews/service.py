from __future__ import annotations

import logging

from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import total_pages
from ..store import get_store
from .models import Review, ReviewPage

logger = logging.getLogger(__name__)

RATING_RANGE_MESSAGE = "Rating must be between 1 and 5"


def _check_rating(rating: float | None) -> float:
    if rating is None or not 1 <= rating <= 5:
        raise ValidationError(RATING_RANGE_MESSAGE)
    return rating


def _require_recipe(recipe_id: str) -> None:
    if get_store().recipes.get(recipe_id) is None:
        raise NotFoundError("Recipe not found!")


def _discard_if_recipe_gone(review: dict) -> None:
    """Undo a review write whose recipe was deleted while it was being written."""
    store = get_store()
    if store.recipes.get(review["recipeId"]) is None:
        store.reviews.delete(review["id"])
        logger.info("Discarded review %s for deleted recipe %s", review["id"], review["recipeId"])
        raise NotFoundError("Recipe not found!")


def recompute_average_rating(recipe_id: str) -> float:
    """Persist the mean review rating (one decimal, 0 without reviews) on the recipe."""
    store = get_store()
    stats = store.reviews.rating_stats([recipe_id]).get(recipe_id)
    average = round(stats.average, 1) if stats else 0.0
    store.recipes.set_average_rating(recipe_id, average)
    return average


def submit_review(
    user_id: str,
    recipe_id: str,
    rating: float | None,
    comment: str = "",
) -> tuple[Review, bool]:
    """Create or replace the user's review of a recipe.

    Returns the stored review and ``True`` when it was newly created.
    """
    rating = _check_rating(rating)
    _require_recipe(recipe_id)

    doc, created = get_store().reviews.upsert(user_id, recipe_id, rating, comment)
    _discard_if_recipe_gone(doc)
    recompute_average_rating(recipe_id)
    logger.info(
        "Review %s for recipe %s by user %s",
        "created" if created else "updated", recipe_id, user_id,
    )
    return Review.model_validate(doc), created


def create_review(
    user_id: str,
    recipe_id: str,
    rating: float | None,
    comment: str = "",
) -> Review:
    """Insert a review, refusing a second review of the same recipe."""
    rating = _check_rating(rating)
    _require_recipe(recipe_id)

    doc = get_store().reviews.insert_unique(user_id, recipe_id, rating, comment)
    if doc is None:
        raise ValidationError("You already reviewed this recipe.")
    _discard_if_recipe_gone(doc)
    recompute_average_rating(recipe_id)
    logger.info("Review created for recipe %s by user %s", recipe_id, user_id)
    return Review.model_validate(doc)


def list_reviews(recipe_id: str, page: int = 1, limit: int = 5) -> ReviewPage:
    docs, total = get_store().reviews.list_for_recipe(recipe_id, (page - 1) * limit, limit)
    return ReviewPage(
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
        reviews=[Review.model_validate(d) for d in docs],
    )


def reviews_for_recipe(recipe_id: str) -> list[Review]:
    return [Review.model_validate(d) for d in get_store().reviews.for_recipe(recipe_id)]


def delete_review(review_id: str, user: dict) -> None:
    """Delete a review; only its author or an admin may do so."""
    store = get_store()
    doc = store.reviews.get(review_id)
    if doc is None:
        raise NotFoundError("Review not found!")
    if doc["userId"] != user.get("id") and user.get("role") != "admin":
        raise ForbiddenError("Not authorized to delete this review!")

    store.reviews.delete(review_id)
    recompute_average_rating(doc["recipeId"])
    logger.info("Review %s deleted by %s", review_id, user.get("username"))
