from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class RatingStats(NamedTuple):
    average: float
    count: int


@dataclass(frozen=True)
class CandidateQuery:
    """Hard filters applied by the store before scoring.

    ``ingredients`` is empty when the request carries fewer than two
    ingredients, in which case no ingredient constraint applies.
    """

    lang: str
    mood: str | None = None
    ingredients: tuple[str, ...] = ()
    max_cook_time: float | None = None


class DuplicateError(Exception):
    """A unique field (``username``/``email``) already exists."""

    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate {field}")
        self.field = field
