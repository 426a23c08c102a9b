from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from peptide_store.models.order import OrderStatus


class OrderItemCreate(BaseModel):
    product_id: UUID
    variation_id: Optional[UUID] = None
    quantity: int = Field(ge=1, le=100)


class OrderCreate(BaseModel):
    """POST /api/v1/orders body (checkout)."""

    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(min_length=1, max_length=64)
    shipping_address: str = Field(min_length=1)
    shipping_city: str = Field(min_length=1, max_length=128)
    shipping_state: str = Field(min_length=1, max_length=128)
    shipping_zip_code: str = Field(min_length=1, max_length=32)
    shipping_country: str = Field(min_length=1, max_length=128)
    shipping_fee: Decimal = Field(default=Decimal("0"), ge=0)
    payment_method_id: Optional[str] = None
    payment_method_name: Optional[str] = None
    notes: Optional[str] = None
    items: list[OrderItemCreate] = Field(min_length=1)
    total_amount: Optional[Decimal] = None  # optional client-sent total; if provided must match computed


class ProductRefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    image_url: Optional[str] = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    product_name: str
    product_price: Decimal
    variation_id: Optional[UUID] = None
    variation_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product: Optional[ProductRefSchema] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip_code: str
    shipping_country: str
    total_amount: Decimal
    shipping_fee: Decimal
    payment_method_id: Optional[str] = None
    payment_method_name: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: list[OrderItemResponse] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    """GET /api/v1/orders: all orders, newest first."""

    orders: list[OrderResponse]


class LifecycleResponse(BaseModel):
    """Outcome of confirm / complete / cancel."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
