from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..models import CamelModel
from ..reviews.models import Review


class Language(str, Enum):
    en = "en"
    fr = "fr"
    ar = "ar"

    @classmethod
    def from_header(cls, header: str | None) -> Language:
        """Pick the language from an ``Accept-Language`` header, defaulting to English."""
        if not header:
            return cls.en
        first = header.split(",")[0].split(";")[0].strip().lower()
        try:
            return cls(first.split("-")[0])
        except ValueError:
            return cls.en


class Mood(str, Enum):
    hungry = "hungry"
    sad = "sad"
    stressed = "stressed"
    tired = "tired"
    relaxed = "relaxed"
    happy = "happy"
    bored = "bored"
    romantic = "romantic"
    anxious = "anxious"
    energetic = "energetic"


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class LocalizedText(BaseModel):
    """One value per supported language; every language is required."""

    en: str = Field(..., min_length=1)
    fr: str = Field(..., min_length=1)
    ar: str = Field(..., min_length=1)

    def get(self, lang: Language | str) -> str:
        return getattr(self, Language(lang).value)


class Ingredient(CamelModel):
    name: LocalizedText
    quantity: str = ""


class RecipeCreate(CamelModel):
    title: LocalizedText
    ingredients: list[Ingredient]
    instructions: LocalizedText
    image: str = ""
    cook_time: int | None = Field(default=None, ge=0)
    difficulty: Difficulty | None = None
    mood: Mood = Mood.hungry
    tags: list[str] = Field(default_factory=list)


class RecipeUpdate(CamelModel):
    title: LocalizedText | None = None
    ingredients: list[Ingredient] | None = None
    instructions: LocalizedText | None = None
    image: str | None = None
    cook_time: int | None = Field(default=None, ge=0)
    difficulty: Difficulty | None = None
    mood: Mood | None = None
    tags: list[str] | None = None


class Recipe(RecipeCreate):
    id: str
    user_id: str
    average_rating: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecipeDetail(Recipe):
    # Live aggregate over reviews; ``None`` when the recipe has none.
    average_rating: float | None = None
    total_reviews: int = 0


class RecipeWithReviews(RecipeDetail):
    reviews: list[Review] = Field(default_factory=list)


class RecipePage(CamelModel):
    total: int
    page: int
    total_pages: int
    recipes: list[Recipe]


class SmartSuggestionRequest(CamelModel):
    mood: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    servings: int | None = Field(default=None, ge=1)
    max_cook_time: float | None = Field(default=None, ge=0)
    min_rating: float = Field(default=0.0, ge=0.0, le=5.0)


class MoodSuggestionRequest(BaseModel):
    mood: str | None = None


class MoodSuggestionResponse(BaseModel):
    mood: Mood
    recipes: list[Recipe]
