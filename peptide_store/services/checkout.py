"""
Checkout: resolve items against the catalog, apply cart rules (stock clamping, price selection),
compute totals and persist a pending order with its items. Stock is only deducted on confirmation.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from peptide_store.models.order import Order, OrderItem, OrderStatus
from peptide_store.repositories.order_repo import OrderRepository
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.schemas.order import OrderCreate
from peptide_store.services.cart import Cart, OutOfStockError

logger = logging.getLogger(__name__)


class CheckoutError(ValueError):
    """Invalid checkout request (unknown product/variation, unavailable product)."""


class StockConflictError(CheckoutError):
    """Requested quantity does not fit available stock, or totals disagree."""


async def build_cart(products: ProductRepository, body: OrderCreate) -> Cart:
    """
    Validate product_id/variation_id against catalog and add each item to a cart.
    Raises CheckoutError for unknown/unavailable items, StockConflictError when stock is short.
    """
    now = datetime.now(timezone.utc)
    cart = Cart()
    for it in body.items:
        product = await products.get_product_by_id(it.product_id)
        if product is None:
            raise CheckoutError(f"Invalid product_id: {it.product_id}")
        if not product.available:
            raise CheckoutError(f"{product.name} is not available")
        variation = None
        if it.variation_id is not None:
            variation = next((v for v in product.variations if v.id == it.variation_id), None)
            if variation is None:
                raise CheckoutError(f"Invalid variation_id for {product.name}: {it.variation_id}")
        try:
            notice = cart.add(product, variation, it.quantity, now=now)
        except OutOfStockError as e:
            raise StockConflictError(str(e)) from e
        if notice is not None:
            raise StockConflictError(f"{product.name}: {notice}")
    return cart


async def place_order(orders: OrderRepository, products: ProductRepository, body: OrderCreate) -> Order:
    cart = await build_cart(products, body)
    total = cart.total_price()
    if body.total_amount is not None and Decimal(body.total_amount) != total:
        raise StockConflictError(f"Total mismatch: computed {total}, received {body.total_amount}")

    order = Order(
        customer_name=body.customer_name,
        customer_email=str(body.customer_email),
        customer_phone=body.customer_phone,
        shipping_address=body.shipping_address,
        shipping_city=body.shipping_city,
        shipping_state=body.shipping_state,
        shipping_zip_code=body.shipping_zip_code,
        shipping_country=body.shipping_country,
        total_amount=total,
        shipping_fee=body.shipping_fee,
        payment_method_id=body.payment_method_id,
        payment_method_name=body.payment_method_name,
        notes=body.notes,
        status=OrderStatus.PENDING,
        items=[
            OrderItem(
                product_id=line.product.id,
                product=line.product,
                product_name=line.product.name,
                product_price=line.product.base_price,
                variation_id=line.variation.id if line.variation is not None else None,
                variation_name=line.variation.name if line.variation is not None else None,
                quantity=line.quantity,
                unit_price=line.price,
                total_price=line.total,
            )
            for line in cart.lines
        ],
    )
    order = await orders.add(order)
    logger.info("order_placed", extra={"order_id": order.id})
    return order
