from __future__ import annotations

import logging

from ..auth.models import Role, UserOut, UserPage, UserUpdate
from ..auth.users import duplicate_message, hash_password
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import total_pages
from ..recipes.models import Recipe
from ..reviews.service import recompute_average_rating
from ..store import DuplicateError, get_store

logger = logging.getLogger(__name__)


def _get_doc(user_id: str) -> dict:
    doc = get_store().users.get(user_id)
    if doc is None:
        raise NotFoundError("User not found!")
    return doc


def get_user(user_id: str) -> UserOut:
    return UserOut.model_validate(_get_doc(user_id))


def list_users(page: int = 1, limit: int = 10, search: str = "") -> UserPage:
    docs, total = get_store().users.search(search, (page - 1) * limit, limit)
    return UserPage(
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
        users=[UserOut.model_validate(d) for d in docs],
    )


def update_user(user_id: str, body: UserUpdate, actor: dict) -> UserOut:
    _get_doc(user_id)
    if body.role is not None and actor.get("role") != Role.admin.value:
        raise ForbiddenError("Only admins can change roles!")

    fields = body.model_dump(exclude_none=True, exclude={"password"}, mode="json")
    if body.password is not None:
        fields["passwordHash"] = hash_password(body.password)

    try:
        updated = get_store().users.update(user_id, fields)
    except DuplicateError as exc:
        raise ValidationError(duplicate_message(exc)) from exc
    if updated is None:
        raise NotFoundError("User not found!")
    return UserOut.model_validate(updated)


def delete_user(user_id: str) -> None:
    """Delete a user and their reviews; recipes they authored are kept."""
    store = get_store()
    if not store.users.delete(user_id):
        raise NotFoundError("User not found!")
    for recipe_id in store.reviews.delete_for_user(user_id):
        recompute_average_rating(recipe_id)
    logger.info("User %s deleted", user_id)


def add_favorite(user_id: str, recipe_id: str) -> None:
    store = get_store()
    _get_doc(user_id)
    if store.recipes.get(recipe_id) is None:
        raise NotFoundError("Recipe not found!")
    if not store.users.add_favorite(user_id, recipe_id):
        raise ValidationError("Recipe already in favorites")


def remove_favorite(user_id: str, recipe_id: str) -> None:
    _get_doc(user_id)
    get_store().users.remove_favorite(user_id, recipe_id)


def get_favorites(user_id: str) -> list[Recipe]:
    doc = _get_doc(user_id)
    return [Recipe.model_validate(d) for d in get_store().recipes.get_many(doc["favorites"])]
