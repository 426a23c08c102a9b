from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from peptide_store.models.testimonial import Testimonial


class TestimonialRepository:
    __test__ = False  # keep pytest from collecting this as a test class

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self, *, active_only: bool = False) -> list[Testimonial]:
        stmt = select(Testimonial)
        if active_only:
            stmt = stmt.where(Testimonial.active.is_(True))
        r = await self.session.execute(stmt.order_by(Testimonial.display_order, Testimonial.created_at))
        return list(r.scalars().all())

    async def get(self, testimonial_id: UUID) -> Testimonial | None:
        r = await self.session.execute(select(Testimonial).where(Testimonial.id == testimonial_id))
        return r.scalar_one_or_none()

    async def max_display_order(self) -> int | None:
        r = await self.session.execute(select(func.max(Testimonial.display_order)))
        return r.scalar_one_or_none()

    async def add(self, testimonial: Testimonial) -> Testimonial:
        self.session.add(testimonial)
        await self.session.flush()
        return testimonial

    async def delete(self, testimonial: Testimonial) -> None:
        await self.session.delete(testimonial)
        await self.session.flush()

    async def flush(self) -> None:
        await self.session.flush()
