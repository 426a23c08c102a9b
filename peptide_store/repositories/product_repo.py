from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction
from sqlalchemy.orm import selectinload

from peptide_store.models.product import Product, ProductVariation


class ProductRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_all_products_with_variations(
        self,
        *,
        include_unavailable: bool = False,
        category: Optional[str] = None,
    ) -> list[Product]:
        stmt = select(Product).options(selectinload(Product.variations))
        if not include_unavailable:
            stmt = stmt.where(Product.available.is_(True))
        if category is not None:
            stmt = stmt.where(Product.category == category)
        r = await self.session.execute(stmt.order_by(Product.featured.desc(), Product.name))
        return list(r.scalars().all())

    async def get_product_by_id(self, product_id: UUID) -> Product | None:
        r = await self.session.execute(
            select(Product).options(selectinload(Product.variations)).where(Product.id == product_id)
        )
        return r.scalar_one_or_none()

    async def get_variation_by_id(self, variation_id: UUID) -> ProductVariation | None:
        r = await self.session.execute(
            select(ProductVariation).where(ProductVariation.id == variation_id)
        )
        return r.scalar_one_or_none()

    async def count_in_category(self, category_id: str) -> int:
        r = await self.session.execute(
            select(func.count()).select_from(Product).where(Product.category == category_id)
        )
        return r.scalar_one()

    async def add(self, obj: Product | ProductVariation) -> None:
        self.session.add(obj)
        await self.session.flush()

    async def delete(self, obj: Product | ProductVariation) -> None:
        await self.session.delete(obj)
        await self.session.flush()

    async def flush(self) -> None:
        await self.session.flush()

    # Stock ledger: point reads (row-locked) and point writes of a single integer field

    async def get_product_stock(self, product_id: UUID) -> int | None:
        r = await self.session.execute(
            select(Product.stock_quantity).where(Product.id == product_id).with_for_update()
        )
        return r.scalar_one_or_none()

    async def set_product_stock(self, product_id: UUID, stock_quantity: int) -> None:
        await self.session.execute(
            update(Product).where(Product.id == product_id).values(stock_quantity=stock_quantity)
        )

    async def get_variation_stock(self, variation_id: UUID) -> int | None:
        r = await self.session.execute(
            select(ProductVariation.stock_quantity)
            .where(ProductVariation.id == variation_id)
            .with_for_update()
        )
        return r.scalar_one_or_none()

    async def set_variation_stock(self, variation_id: UUID, stock_quantity: int) -> None:
        await self.session.execute(
            update(ProductVariation)
            .where(ProductVariation.id == variation_id)
            .values(stock_quantity=stock_quantity)
        )

    def savepoint(self) -> AsyncSessionTransaction:
        """Nested transaction; a failure inside rolls back only the savepoint."""
        return self.session.begin_nested()
