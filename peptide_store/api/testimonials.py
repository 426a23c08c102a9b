"""
Testimonials gallery: public list of active entries; admin manager over all entries.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from peptide_store.api.deps import get_testimonial_repo
from peptide_store.core.auth import require_role
from peptide_store.models.testimonial import Testimonial
from peptide_store.models.user import User, UserRole
from peptide_store.repositories.testimonial_repo import TestimonialRepository
from peptide_store.schemas.testimonial import TestimonialCreate, TestimonialSchema, TestimonialUpdate
from peptide_store.services.categories import next_position

router = APIRouter(tags=["testimonials"])


async def _get_testimonial_or_404(testimonials: TestimonialRepository, testimonial_id: UUID) -> Testimonial:
    testimonial = await testimonials.get(testimonial_id)
    if testimonial is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Testimonial not found")
    return testimonial


@router.get("/testimonials", response_model=list[TestimonialSchema], summary="Active testimonials")
async def list_testimonials(
    testimonials: TestimonialRepository = Depends(get_testimonial_repo),
) -> list[TestimonialSchema]:
    return [TestimonialSchema.model_validate(t) for t in await testimonials.list_all(active_only=True)]


@router.get("/admin/testimonials", response_model=list[TestimonialSchema], summary="All testimonials (admin)")
async def list_all_testimonials(
    current_user: User = require_role(UserRole.ADMIN),
    testimonials: TestimonialRepository = Depends(get_testimonial_repo),
) -> list[TestimonialSchema]:
    return [TestimonialSchema.model_validate(t) for t in await testimonials.list_all()]


@router.post("/admin/testimonials", response_model=TestimonialSchema, status_code=status.HTTP_201_CREATED)
async def create_testimonial(
    body: TestimonialCreate,
    current_user: User = require_role(UserRole.ADMIN),
    testimonials: TestimonialRepository = Depends(get_testimonial_repo),
) -> TestimonialSchema:
    data = body.model_dump()
    if data["display_order"] is None:
        data["display_order"] = next_position(await testimonials.max_display_order())
    testimonial = Testimonial(**data)
    await testimonials.add(testimonial)
    return TestimonialSchema.model_validate(testimonial)


@router.patch("/admin/testimonials/{testimonial_id}", response_model=TestimonialSchema)
async def update_testimonial(
    testimonial_id: UUID,
    body: TestimonialUpdate,
    current_user: User = require_role(UserRole.ADMIN),
    testimonials: TestimonialRepository = Depends(get_testimonial_repo),
) -> TestimonialSchema:
    testimonial = await _get_testimonial_or_404(testimonials, testimonial_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(testimonial, field, value)
    await testimonials.flush()
    return TestimonialSchema.model_validate(testimonial)


@router.delete("/admin/testimonials/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_testimonial(
    testimonial_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    testimonials: TestimonialRepository = Depends(get_testimonial_repo),
) -> None:
    testimonial = await _get_testimonial_or_404(testimonials, testimonial_id)
    await testimonials.delete(testimonial)
