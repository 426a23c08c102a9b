"""
Categories: public list of active categories; admin create/update/delete/reorder.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from peptide_store.api.deps import get_category_repo, get_product_repo
from peptide_store.core.auth import require_role
from peptide_store.models.category import Category
from peptide_store.models.user import User, UserRole
from peptide_store.repositories.category_repo import CategoryRepository
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.schemas.category import CategoryCreate, CategoryReorder, CategorySchema, CategoryUpdate
from peptide_store.services.categories import CategoryError, resolve_category_id

router = APIRouter(tags=["categories"])


async def _get_category_or_404(categories: CategoryRepository, category_id: str) -> Category:
    category = await categories.get(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/categories", response_model=list[CategorySchema], summary="Active categories")
async def list_categories(
    categories: CategoryRepository = Depends(get_category_repo),
) -> list[CategorySchema]:
    return [CategorySchema.model_validate(c) for c in await categories.list_all(active_only=True)]


@router.get("/admin/categories", response_model=list[CategorySchema], summary="All categories (admin)")
async def list_all_categories(
    current_user: User = require_role(UserRole.ADMIN),
    categories: CategoryRepository = Depends(get_category_repo),
) -> list[CategorySchema]:
    return [CategorySchema.model_validate(c) for c in await categories.list_all()]


@router.post("/admin/categories", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    current_user: User = require_role(UserRole.ADMIN),
    categories: CategoryRepository = Depends(get_category_repo),
) -> CategorySchema:
    try:
        category_id = resolve_category_id(body.name, body.id)
    except CategoryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if await categories.get(category_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Category {category_id} already exists")
    sort_order = body.sort_order
    if sort_order is None:
        sort_order = (await categories.max_sort_order() or 0) + 1
    category = Category(id=category_id, name=body.name, icon=body.icon, sort_order=sort_order, active=body.active)
    await categories.add(category)
    return CategorySchema.model_validate(category)


@router.patch("/admin/categories/{category_id}", response_model=CategorySchema)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    current_user: User = require_role(UserRole.ADMIN),
    categories: CategoryRepository = Depends(get_category_repo),
) -> CategorySchema:
    category = await _get_category_or_404(categories, category_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    await categories.flush()
    return CategorySchema.model_validate(category)


@router.delete("/admin/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    current_user: User = require_role(UserRole.ADMIN),
    categories: CategoryRepository = Depends(get_category_repo),
    products: ProductRepository = Depends(get_product_repo),
) -> None:
    category = await _get_category_or_404(categories, category_id)
    in_use = await products.count_in_category(category_id)
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot delete category: {in_use} product(s) still use it",
        )
    await categories.delete(category)


@router.put("/admin/categories/order", response_model=list[CategorySchema], summary="Reorder categories")
async def reorder_categories(
    body: CategoryReorder,
    current_user: User = require_role(UserRole.ADMIN),
    categories: CategoryRepository = Depends(get_category_repo),
) -> list[CategorySchema]:
    existing = {c.id: c for c in await categories.list_all()}
    unknown = [cid for cid in body.ids if cid not in existing]
    if unknown:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown categories: {', '.join(unknown)}")
    for position, cid in enumerate(body.ids, start=1):
        existing[cid].sort_order = position
    await categories.flush()
    return [CategorySchema.model_validate(c) for c in await categories.list_all()]
