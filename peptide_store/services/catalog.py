"""
Catalog pricing. A variation carries its own price; a plain product sells at its
discount price while the discount is active (and inside its optional date window),
otherwise at its base price.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from peptide_store.models.product import Product, ProductVariation


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def discount_applies(product: Product, now: Optional[datetime] = None) -> bool:
    if not product.discount_active or product.discount_price is None:
        return False
    now = _as_utc(now or datetime.now(timezone.utc))
    if product.discount_start_date is not None and now < _as_utc(product.discount_start_date):
        return False
    if product.discount_end_date is not None and now > _as_utc(product.discount_end_date):
        return False
    return True


def effective_price(
    product: Product,
    variation: Optional[ProductVariation] = None,
    now: Optional[datetime] = None,
) -> Decimal:
    if variation is not None:
        return Decimal(variation.price)
    if discount_applies(product, now):
        return Decimal(product.discount_price)
    return Decimal(product.base_price)


def available_stock(product: Product, variation: Optional[ProductVariation] = None) -> int:
    return variation.stock_quantity if variation is not None else product.stock_quantity
