from __future__ import annotations

from typing import ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from peptide_store.schemas.partial import PartialUpdate


class TestimonialSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    image_url: str
    display_order: int
    active: bool


class TestimonialCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: str = Field(min_length=1)
    display_order: Optional[int] = None
    active: bool = True


class TestimonialUpdate(PartialUpdate):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    display_order: Optional[int] = None
    active: Optional[bool] = None
