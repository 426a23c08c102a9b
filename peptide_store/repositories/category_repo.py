from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from peptide_store.models.category import Category


class CategoryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self, *, active_only: bool = False) -> list[Category]:
        stmt = select(Category)
        if active_only:
            stmt = stmt.where(Category.active.is_(True))
        r = await self.session.execute(stmt.order_by(Category.sort_order, Category.name))
        return list(r.scalars().all())

    async def get(self, category_id: str) -> Category | None:
        r = await self.session.execute(select(Category).where(Category.id == category_id))
        return r.scalar_one_or_none()

    async def max_sort_order(self) -> int | None:
        r = await self.session.execute(select(func.max(Category.sort_order)))
        return r.scalar_one_or_none()

    async def add(self, category: Category) -> Category:
        self.session.add(category)
        await self.session.flush()
        return category

    async def delete(self, category: Category) -> None:
        await self.session.delete(category)
        await self.session.flush()

    async def flush(self) -> None:
        await self.session.flush()
