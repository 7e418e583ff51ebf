from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from groq import Groq

from ..errors import ServiceUnavailableError, UpstreamError
from ..recipes.models import Language, LocalizedText
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .models import (
    AISuggestionRequest,
    AISuggestionResponse,
    GeneratedIngredient,
    GeneratedRecipe,
    LocalizedSteps,
)
from .prompts import ERROR_MESSAGES, RESULT_MESSAGES, SYSTEM_PROMPTS, build_user_prompt

logger = logging.getLogger(__name__)


def _same_everywhere(text: str) -> LocalizedText:
    # The model answers in the requested language only; mirror it across fields.
    return LocalizedText(en=text, fr=text, ar=text)


def _cook_time(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 30


def _to_generated_recipe(raw: dict[str, Any], index: int, stamp: datetime) -> GeneratedRecipe:
    title = str(raw.get("title") or "").strip()
    description = str(raw.get("description") or "").strip() or title

    steps = raw.get("instructions") or []
    if isinstance(steps, str):
        steps = [steps]
    steps = [str(s) for s in steps]

    ingredients = [
        GeneratedIngredient(
            name=_same_everywhere(str(ing["name"])),
            quantity=str(ing.get("quantity") or ""),
            unit=str(ing.get("unit") or ""),
        )
        for ing in raw.get("ingredients") or []
    ]

    return GeneratedRecipe(
        id=f"ai-generated-{int(stamp.timestamp() * 1000)}-{index}",
        title=_same_everywhere(title),
        description=_same_everywhere(description),
        ingredients=ingredients,
        instructions=LocalizedSteps(en=steps, fr=steps, ar=steps),
        cook_time=_cook_time(raw.get("cookTime")),
        difficulty=str(raw.get("difficulty") or "medium"),
        tags=[str(t) for t in raw.get("tags") or []],
        generated_at=stamp,
        nutrition_highlights=str(raw.get("nutritionHighlights") or ""),
    )


def parse_recipes(content: str, stamp: datetime) -> list[GeneratedRecipe]:
    """Parse the model output: ``{"recipes": [...]}`` or a bare JSON array."""
    parsed = json.loads(content)
    items = parsed if isinstance(parsed, list) else parsed.get("recipes", [])
    return [_to_generated_recipe(item, i, stamp) for i, item in enumerate(items)]


def generate_recipe_suggestions(
    request: AISuggestionRequest,
    lang: Language,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> AISuggestionResponse:
    """
    Ask the Groq LLM for fresh recipe ideas matching a natural-language request.

    Raises ``ServiceUnavailableError`` when no API key is configured and
    ``UpstreamError`` when the call fails or its output cannot be parsed.
    Error messages are localized to ``lang``.
    """
    if not config.enabled or not config.api_key:
        raise ServiceUnavailableError(ERROR_MESSAGES["not_configured"][lang])

    user_prompt = build_user_prompt(
        request.prompt, lang, request.mood, request.ingredients, request.servings,
    )

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPTS[lang]},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""
    except Exception as exc:
        logger.warning("Groq recipe generation failed", exc_info=True)
        raise UpstreamError(ERROR_MESSAGES["upstream"][lang]) from exc

    try:
        recipes = parse_recipes(content, datetime.now(timezone.utc))
    except (ValueError, TypeError, AttributeError, KeyError) as exc:
        logger.warning("Could not parse Groq recipe response", exc_info=True)
        raise UpstreamError(ERROR_MESSAGES["bad_response"][lang]) from exc

    return AISuggestionResponse(
        message=RESULT_MESSAGES[lang].format(count=len(recipes)),
        recipes=recipes,
        prompt=user_prompt,
    )
