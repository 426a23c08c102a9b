from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from peptide_store.models.order import Order, OrderItem, OrderStatus


class OrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, order: Order) -> Order:
        """Persist a new order together with its items (one flush)."""
        self.session.add(order)
        await self.session.flush()
        return order

    async def list_with_items(self) -> list[Order]:
        """All orders, newest first, with items and each item's product."""
        r = await self.session.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .order_by(Order.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(r.scalars().all())

    async def list_by_status(self, status: OrderStatus) -> list[Order]:
        r = await self.session.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.status == status)
            .order_by(Order.created_at.desc())
        )
        return list(r.scalars().all())

    async def get_by_id(self, order_id: UUID) -> Order | None:
        r = await self.session.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return r.scalar_one_or_none()

    async def transition(
        self,
        order_id: UUID,
        sources: Iterable[OrderStatus],
        target: OrderStatus,
        **values: Any,
    ) -> bool:
        """
        Conditional status update: UPDATE ... WHERE id = :id AND status IN (:sources).
        Returns True only when exactly one row moved, so concurrent callers cannot both win.
        """
        r = await self.session.execute(
            update(Order)
            .where(Order.id == order_id, Order.status.in_(list(sources)))
            .values(status=target, **values)
        )
        return r.rowcount == 1

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
