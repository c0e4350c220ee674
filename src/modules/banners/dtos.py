"""Banner DTOs (Pydantic v2, immutable).

``UpdateBannerDTO`` applies only the fields present in ``model_fields_set``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CreateBannerDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    subtitle: str = ""
    description: str = ""
    button_text: str = "Shop Now"
    button_link: str = "/products"
    image: str
    bg_color: str = ""
    is_active: bool = True
    position: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("image")
    @classmethod
    def image_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Please provide a banner image URL.")
        return v.strip()

    def to_fields(self) -> Dict[str, Any]:
        data = self.model_dump()
        if data["start_date"] is None:
            data.pop("start_date")
        return data


class UpdateBannerDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    button_text: Optional[str] = None
    button_link: Optional[str] = None
    image: Optional[str] = None
    bg_color: Optional[str] = None
    is_active: Optional[bool] = None
    position: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def changes(self) -> Dict[str, Any]:
        """Supplied fields; ``None`` only survives for the date bounds."""
        return {
            field: value
            for field, value in self.model_dump(include=self.model_fields_set).items()
            if value is not None or field in ("start_date", "end_date")
        }
