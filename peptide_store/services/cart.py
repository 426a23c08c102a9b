"""
Cart rules used at checkout: lines merge per product/variation, quantities are clamped
to available stock with a human-readable notice, and an out-of-stock selection is refused.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from peptide_store.models.product import Product, ProductVariation
from peptide_store.services.catalog import available_stock, effective_price


class OutOfStockError(ValueError):
    pass


def _units(n: int) -> str:
    return "item" if n == 1 else "items"


@dataclass
class CartLine:
    product: Product
    variation: Optional[ProductVariation]
    quantity: int
    price: Decimal

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity

    def matches(self, product: Product, variation: Optional[ProductVariation]) -> bool:
        if self.product.id != product.id:
            return False
        if variation is None:
            return self.variation is None
        return self.variation is not None and self.variation.id == variation.id


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)

    def add(
        self,
        product: Product,
        variation: Optional[ProductVariation] = None,
        quantity: int = 1,
        now: Optional[datetime] = None,
    ) -> Optional[str]:
        """
        Add quantity of a product (or one of its variations).
        Returns a notice when the quantity had to be reduced to fit stock.
        Raises OutOfStockError when nothing can be added.
        """
        stock = available_stock(product, variation)
        if stock <= 0:
            raise OutOfStockError(f"{product.name} is out of stock")

        notice = None
        existing = next((line for line in self.lines if line.matches(product, variation)), None)
        if existing is not None:
            if existing.quantity + quantity > stock:
                can_add = stock - existing.quantity
                if can_add <= 0:
                    raise OutOfStockError(
                        f"Only {stock} {_units(stock)} available in stock. "
                        f"You already have {existing.quantity} in your cart."
                    )
                notice = (
                    f"Only {stock} {_units(stock)} available in stock. "
                    f"Adding {can_add} instead of {quantity}."
                )
                quantity = can_add
            existing.quantity += quantity
            return notice

        if quantity > stock:
            notice = f"Only {stock} {_units(stock)} available in stock. Adding {stock} instead of {quantity}."
            quantity = stock
        self.lines.append(
            CartLine(
                product=product,
                variation=variation,
                quantity=quantity,
                price=effective_price(product, variation, now),
            )
        )
        return notice

    def update_quantity(self, index: int, quantity: int) -> Optional[str]:
        if quantity <= 0:
            self.remove(index)
            return None
        line = self.lines[index]
        stock = available_stock(line.product, line.variation)
        notice = None
        if quantity > stock:
            notice = f"Only {stock} {_units(stock)} available in stock."
            quantity = stock
        line.quantity = quantity
        return notice

    def remove(self, index: int) -> None:
        del self.lines[index]

    def clear(self) -> None:
        self.lines.clear()

    def total_price(self) -> Decimal:
        return sum((line.total for line in self.lines), Decimal("0"))

    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)
