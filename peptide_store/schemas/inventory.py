from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from peptide_store.schemas.catalog import ProductSchema


class InventoryStatsSchema(BaseModel):
    total_sales: Decimal
    vials_sold: int
    inventory_value: Decimal
    total_items: int
    low_stock_count: int


class InventoryResponse(BaseModel):
    """GET /api/v1/admin/inventory: dashboard stats and the filtered product list."""

    stats: InventoryStatsSchema
    products: list[ProductSchema]
