from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from peptide_store.schemas.partial import PartialUpdate


def _assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive discount dates are taken as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class VariationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    quantity_mg: Decimal
    price: Decimal
    stock_quantity: int


class ProductSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    category: str
    base_price: Decimal
    discount_price: Optional[Decimal] = None
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: bool
    current_price: Decimal
    purity_percentage: Decimal
    molecular_weight: Optional[str] = None
    cas_number: Optional[str] = None
    sequence: Optional[str] = None
    storage_conditions: str
    stock_quantity: int
    available: bool
    featured: bool
    image_url: Optional[str] = None
    safety_sheet_url: Optional[str] = None
    variations: list[VariationSchema] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    """GET /api/v1/products: available products with variations and current prices."""

    products: list[ProductSchema]


class VariationCreate(BaseModel):
    name: str = Field(min_length=1)
    quantity_mg: Decimal = Field(gt=0)
    price: Decimal = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)


class VariationUpdate(PartialUpdate):
    name: Optional[str] = Field(None, min_length=1)
    quantity_mg: Optional[Decimal] = Field(None, gt=0)
    price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    category: str
    base_price: Decimal = Field(ge=0)
    discount_price: Optional[Decimal] = Field(None, ge=0)
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: bool = False
    purity_percentage: Decimal = Field(default=Decimal("99.00"), ge=0, le=100)
    molecular_weight: Optional[str] = None
    cas_number: Optional[str] = None
    sequence: Optional[str] = None
    storage_conditions: str = "Store at -20°C"
    stock_quantity: int = Field(default=0, ge=0)
    available: bool = True
    featured: bool = False
    image_url: Optional[str] = None
    safety_sheet_url: Optional[str] = None
    variations: list[VariationCreate] = Field(default_factory=list)

    @field_validator("discount_start_date", "discount_end_date")
    @classmethod
    def discount_dates_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(v)


class ProductUpdate(PartialUpdate):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({
        "discount_price", "discount_start_date", "discount_end_date",
        "molecular_weight", "cas_number", "sequence", "image_url", "safety_sheet_url",
    })

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, ge=0)
    discount_price: Optional[Decimal] = Field(None, ge=0)
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: Optional[bool] = None
    purity_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    molecular_weight: Optional[str] = None
    cas_number: Optional[str] = None
    sequence: Optional[str] = None
    storage_conditions: Optional[str] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
    featured: Optional[bool] = None
    image_url: Optional[str] = None
    safety_sheet_url: Optional[str] = None

    @field_validator("discount_start_date", "discount_end_date")
    @classmethod
    def discount_dates_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(v)
