"""
Order lifecycle: pending -> confirmed -> completed, with cancellation from pending/confirmed.
Confirmation deducts stock for every item (variation stock when the item names one,
otherwise product stock), floored at zero. Deduction is best-effort per item: a failure
is logged and rolled back to that item's savepoint, the status change is kept.
Cancellation never restores stock. Each operation commits its own work, so a failed
commit comes back as a store failure like any other write error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from peptide_store.core.metrics import ORDER_TRANSITIONS, STOCK_DEDUCTIONS
from peptide_store.models.order import Order, OrderItem, OrderStatus
from peptide_store.repositories.order_repo import OrderRepository
from peptide_store.repositories.product_repo import ProductRepository

logger = logging.getLogger(__name__)

ALREADY_CONFIRMED = "Order is already confirmed or completed"
ORDER_NOT_FOUND = "Order not found"

# Source states each target may be reached from
TRANSITION_SOURCES: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.CONFIRMED: (OrderStatus.PENDING,),
    OrderStatus.COMPLETED: (OrderStatus.CONFIRMED,),
    OrderStatus.CANCELLED: (OrderStatus.PENDING, OrderStatus.CONFIRMED),
}


class LifecycleErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    STORE_FAILURE = "store_failure"


@dataclass(frozen=True)
class LifecycleResult:
    success: bool
    error: Optional[str] = None
    error_kind: Optional[LifecycleErrorKind] = None

    @classmethod
    def ok(cls) -> "LifecycleResult":
        return cls(success=True)

    @classmethod
    def fail(cls, kind: LifecycleErrorKind, message: str) -> "LifecycleResult":
        return cls(success=False, error=message, error_kind=kind)


def _invalid_transition_message(current: OrderStatus, target: OrderStatus) -> str:
    if target is OrderStatus.CONFIRMED and current in (OrderStatus.CONFIRMED, OrderStatus.COMPLETED):
        return ALREADY_CONFIRMED
    if current.is_terminal:
        return f"Order is {current.value} and can no longer be marked as {target.value}"
    allowed = ", ".join(s.value for s in TRANSITION_SOURCES[target])
    return f"Cannot mark a {current.value} order as {target.value} (allowed from: {allowed})"


def _record(target: OrderStatus, result: LifecycleResult) -> LifecycleResult:
    outcome = "ok" if result.success else result.error_kind.value
    ORDER_TRANSITIONS.labels(target=target.value, outcome=outcome).inc()
    return result


class OrderLifecycleService:
    """Mediates order status transitions and the stock deduction tied to confirmation."""

    def __init__(self, orders: OrderRepository, products: ProductRepository) -> None:
        self.orders = orders
        self.products = products

    async def fetch_orders(self) -> list[Order]:
        """All orders with items and item product identity, newest first."""
        return await self.orders.list_with_items()

    async def get_order(self, order_id: UUID) -> Order | None:
        return await self.orders.get_by_id(order_id)

    async def confirm(self, order_id: UUID) -> LifecycleResult:
        return _record(OrderStatus.CONFIRMED, await self._confirm(order_id))

    async def _confirm(self, order_id: UUID) -> LifecycleResult:
        try:
            order = await self.orders.get_by_id(order_id)
            if order is None:
                return LifecycleResult.fail(LifecycleErrorKind.NOT_FOUND, ORDER_NOT_FOUND)
            current = OrderStatus(order.status)
            if current is not OrderStatus.PENDING:
                return LifecycleResult.fail(
                    LifecycleErrorKind.INVALID_TRANSITION,
                    _invalid_transition_message(current, OrderStatus.CONFIRMED),
                )

            moved = await self.orders.transition(
                order_id,
                TRANSITION_SOURCES[OrderStatus.CONFIRMED],
                OrderStatus.CONFIRMED,
                confirmed_at=datetime.now(timezone.utc),
            )
            if not moved:
                # Another session confirmed (or cancelled) the order between read and write
                logger.warning("order_confirm_lost_race", extra={"order_id": order_id})
                return LifecycleResult.fail(LifecycleErrorKind.INVALID_TRANSITION, ALREADY_CONFIRMED)

            for item in list(order.items):
                await self._deduct_item_stock(order_id, item)
            await self.orders.commit()
        except SQLAlchemyError as e:
            logger.exception("order_confirm_failed", extra={"order_id": order_id})
            await self._rollback(order_id)
            return LifecycleResult.fail(LifecycleErrorKind.STORE_FAILURE, f"Failed to confirm order: {e}")

        logger.info("order_confirmed", extra={"order_id": order_id})
        return LifecycleResult.ok()

    async def complete(self, order_id: UUID) -> LifecycleResult:
        return await self._move(order_id, OrderStatus.COMPLETED, completed_at=datetime.now(timezone.utc))

    async def cancel(self, order_id: UUID) -> LifecycleResult:
        # Stock deducted at confirmation is not returned; see DESIGN.md
        return await self._move(order_id, OrderStatus.CANCELLED)

    async def _move(self, order_id: UUID, target: OrderStatus, **values) -> LifecycleResult:
        """Status-only transition (no stock side effects)."""
        return _record(target, await self._transition_only(order_id, target, **values))

    async def _transition_only(self, order_id: UUID, target: OrderStatus, **values) -> LifecycleResult:
        try:
            order = await self.orders.get_by_id(order_id)
            if order is None:
                return LifecycleResult.fail(LifecycleErrorKind.NOT_FOUND, ORDER_NOT_FOUND)
            current = OrderStatus(order.status)
            if current not in TRANSITION_SOURCES[target]:
                return LifecycleResult.fail(
                    LifecycleErrorKind.INVALID_TRANSITION,
                    _invalid_transition_message(current, target),
                )
            moved = await self.orders.transition(order_id, TRANSITION_SOURCES[target], target, **values)
            if not moved:
                return LifecycleResult.fail(
                    LifecycleErrorKind.INVALID_TRANSITION,
                    f"Order status changed concurrently; could not mark it as {target.value}",
                )
            await self.orders.commit()
        except SQLAlchemyError as e:
            logger.exception("order_transition_failed", extra={"order_id": order_id})
            await self._rollback(order_id)
            return LifecycleResult.fail(
                LifecycleErrorKind.STORE_FAILURE, f"Failed to mark order as {target.value}: {e}"
            )

        logger.info("order_%s", target.value, extra={"order_id": order_id})
        return LifecycleResult.ok()

    async def _rollback(self, order_id: UUID) -> None:
        """Leave the session usable for the request teardown after a failed write or commit."""
        try:
            await self.orders.rollback()
        except SQLAlchemyError:
            logger.exception("order_rollback_failed", extra={"order_id": order_id})

    async def _deduct_item_stock(self, order_id: UUID, item: OrderItem) -> None:
        """Deduct one item's quantity from its variation (or product) stock, floored at zero."""
        log_extra = {
            "order_id": order_id,
            "product_id": item.product_id,
            "variation_id": item.variation_id,
            "quantity": item.quantity,
        }
        target = "variation" if item.variation_id is not None else "product"
        try:
            async with self.products.savepoint():
                if item.variation_id is not None:
                    current = await self.products.get_variation_stock(item.variation_id)
                else:
                    current = await self.products.get_product_stock(item.product_id)
                if current is None:
                    logger.warning("stock_deduction_skipped_missing_target", extra=log_extra)
                    STOCK_DEDUCTIONS.labels(target=target, outcome="skipped").inc()
                    return

                new_stock = max(0, current - item.quantity)
                if item.variation_id is not None:
                    await self.products.set_variation_stock(item.variation_id, new_stock)
                else:
                    await self.products.set_product_stock(item.product_id, new_stock)
        except SQLAlchemyError:
            logger.exception("stock_deduction_failed", extra=log_extra)
            STOCK_DEDUCTIONS.labels(target=target, outcome="failed").inc()
            return

        STOCK_DEDUCTIONS.labels(target=target, outcome="ok").inc()
        logger.info(
            "stock_deducted",
            extra={**log_extra, "stock_before": current, "stock_after": new_stock},
        )
