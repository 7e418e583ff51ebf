from __future__ import annotations

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["RECIPES_STORE"] = "memory"
os.environ["GROQ_API_KEY"] = ""

import pytest

from recipe_backend.auth.users import seed_demo_users
from recipe_backend.recipes.models import Recipe, RecipeCreate
from recipe_backend.recipes.service import create_recipe
from recipe_backend.store import reset_store


def recipe_payload(
    title: str = "Chicken Rice",
    ingredients: tuple[str, ...] = ("chicken", "rice"),
    mood: str = "hungry",
    tags: tuple[str, ...] = (),
    cook_time: int | None = 30,
) -> dict:
    return {
        "title": {"en": title, "fr": f"{title} (fr)", "ar": f"{title} (ar)"},
        "ingredients": [
            {"name": {"en": name, "fr": f"{name}-fr", "ar": f"{name}-ar"}, "quantity": "1"}
            for name in ingredients
        ],
        "instructions": {"en": "Cook it.", "fr": "Faites cuire.", "ar": "اطبخه."},
        "cookTime": cook_time,
        "difficulty": "easy",
        "mood": mood,
        "tags": list(tags),
    }


@pytest.fixture(autouse=True)
def fresh_store():
    """Every test starts from an empty in-memory store with the demo accounts."""
    reset_store()
    seed_demo_users()
    yield
    reset_store()


@pytest.fixture
def add_recipe():
    def _add(**kwargs) -> Recipe:
        return create_recipe(RecipeCreate.model_validate(recipe_payload(**kwargs)), "owner-1")

    return _add
