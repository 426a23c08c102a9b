"""
Inventory dashboard: sales over completed orders, stock valuation, low-stock counts
and product filtering for the admin console.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from peptide_store.models.order import Order, OrderStatus
from peptide_store.models.product import Product


class StockFilter(str, Enum):
    ALL = "all"
    IN_STOCK = "in_stock"
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"


@dataclass(frozen=True)
class InventoryStats:
    total_sales: Decimal
    vials_sold: int
    inventory_value: Decimal
    total_items: int
    low_stock_count: int


def is_low_stock(product: Product, threshold: int) -> bool:
    return 0 < product.stock_quantity < threshold


def compute_stats(orders: Iterable[Order], products: list[Product], low_stock_threshold: int) -> InventoryStats:
    completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
    return InventoryStats(
        total_sales=sum((Decimal(o.total_amount) for o in completed), Decimal("0")),
        vials_sold=sum(item.quantity for o in completed for item in o.items),
        inventory_value=sum((Decimal(p.base_price) * p.stock_quantity for p in products), Decimal("0")),
        total_items=len(products),
        low_stock_count=sum(1 for p in products if is_low_stock(p, low_stock_threshold)),
    )


def filter_products(
    products: Iterable[Product],
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    stock: StockFilter = StockFilter.ALL,
    low_stock_threshold: int = 10,
) -> list[Product]:
    needle = (search or "").strip().lower()
    result = []
    for p in products:
        if needle and needle not in p.name.lower() and needle not in (p.description or "").lower():
            continue
        if category and category != "all" and p.category != category:
            continue
        if stock is StockFilter.IN_STOCK and p.stock_quantity <= 0:
            continue
        if stock is StockFilter.OUT_OF_STOCK and p.stock_quantity != 0:
            continue
        if stock is StockFilter.LOW_STOCK and not is_low_stock(p, low_stock_threshold):
            continue
        result.append(p)
    return result
