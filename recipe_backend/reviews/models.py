from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..models import CamelModel


class ReviewRequest(BaseModel):
    # Range is checked by the service so the error message stays stable.
    rating: float | None = None
    comment: str = Field(default="", max_length=2000)


class Review(CamelModel):
    id: str
    user_id: str
    recipe_id: str
    rating: float
    comment: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewWriteResponse(BaseModel):
    message: str
    review: Review


class ReviewPage(CamelModel):
    total: int
    page: int
    total_pages: int
    reviews: list[Review]
