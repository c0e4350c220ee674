"""Review DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateReviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: UUID
    rating: int
    title: str = ""
    comment: str
    images: List[str] = Field(default_factory=list)

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, v: int) -> int:
        if not 1 <= v <= 5:
            raise ValueError("Rating must be between 1 and 5.")
        return v

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Comment must not be empty.")
        return v.strip()
