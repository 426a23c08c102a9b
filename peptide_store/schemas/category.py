from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from peptide_store.schemas.partial import PartialUpdate


class CategorySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: str
    sort_order: int
    active: bool


class CategoryCreate(BaseModel):
    id: Optional[str] = None  # derived from name when omitted
    name: str = Field(min_length=1)
    icon: str = Field(min_length=1)
    sort_order: Optional[int] = None
    active: bool = True


class CategoryUpdate(PartialUpdate):
    name: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, min_length=1)
    sort_order: Optional[int] = None
    active: Optional[bool] = None


class CategoryReorder(BaseModel):
    """PUT /api/v1/admin/categories/order body: ids in their new display order."""

    ids: list[str] = Field(min_length=1)
