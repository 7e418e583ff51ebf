from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..models import CamelModel
from ..recipes.models import LocalizedText


class AISuggestionRequest(CamelModel):
    prompt: str = Field(..., min_length=1, max_length=1000)
    mood: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    servings: int = Field(default=2, ge=1, le=50)


class GeneratedIngredient(CamelModel):
    name: LocalizedText
    quantity: str = ""
    unit: str = ""


class LocalizedSteps(BaseModel):
    en: list[str]
    fr: list[str]
    ar: list[str]


class GeneratedRecipe(CamelModel):
    id: str
    title: LocalizedText
    description: LocalizedText
    ingredients: list[GeneratedIngredient]
    instructions: LocalizedSteps
    cook_time: int = 30
    difficulty: str = "medium"
    tags: list[str] = Field(default_factory=list)
    image: str = "/placeholder-recipe.jpg"
    is_ai_generated: bool = Field(default=True, alias="isAIGenerated")
    generated_at: datetime
    nutrition_highlights: str = ""


class AISuggestionResponse(CamelModel):
    message: str
    recipes: list[GeneratedRecipe]
    is_ai_generated: bool = Field(default=True, alias="isAIGenerated")
    prompt: str
