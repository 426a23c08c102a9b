"""
Admin: create/update/delete products and variations (manual stock edits included),
plus the inventory dashboard.
"""
from dataclasses import asdict
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from peptide_store.api.catalog import product_to_schema
from peptide_store.api.deps import get_category_repo, get_order_repo, get_product_repo
from peptide_store.config import get_settings
from peptide_store.core.auth import require_role
from peptide_store.models.order import OrderStatus
from peptide_store.models.product import Product, ProductVariation
from peptide_store.models.user import User, UserRole
from peptide_store.repositories.category_repo import CategoryRepository
from peptide_store.repositories.order_repo import OrderRepository
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.schemas.catalog import (
    ProductCreate,
    ProductSchema,
    ProductUpdate,
    VariationCreate,
    VariationSchema,
    VariationUpdate,
)
from peptide_store.schemas.inventory import InventoryResponse, InventoryStatsSchema
from peptide_store.services.inventory import StockFilter, compute_stats, filter_products

router = APIRouter(prefix="/admin", tags=["admin"])


async def _require_category(categories: CategoryRepository, category_id: str) -> None:
    if await categories.get(category_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown category: {category_id}")


async def _get_product_or_404(products: ProductRepository, product_id: UUID) -> Product:
    product = await products.get_product_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("/products", response_model=list[ProductSchema], summary="All products, including unavailable")
async def list_all_products(
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
) -> list[ProductSchema]:
    rows = await products.get_all_products_with_variations(include_unavailable=True)
    return [product_to_schema(p) for p in rows]


@router.post("/products", response_model=ProductSchema, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
    categories: CategoryRepository = Depends(get_category_repo),
) -> ProductSchema:
    await _require_category(categories, body.category)
    product = Product(**body.model_dump(exclude={"variations"}))
    product.variations = [ProductVariation(**v.model_dump()) for v in body.variations]
    await products.add(product)
    product = await _get_product_or_404(products, product.id)
    return product_to_schema(product)


@router.patch("/products/{product_id}", response_model=ProductSchema)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
    categories: CategoryRepository = Depends(get_category_repo),
) -> ProductSchema:
    product = await _get_product_or_404(products, product_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("category") is not None:
        await _require_category(categories, changes["category"])
    for field, value in changes.items():
        setattr(product, field, value)
    await products.flush()
    return product_to_schema(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
) -> None:
    product = await _get_product_or_404(products, product_id)
    await products.delete(product)


@router.post(
    "/products/{product_id}/variations",
    response_model=VariationSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_variation(
    product_id: UUID,
    body: VariationCreate,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
) -> VariationSchema:
    await _get_product_or_404(products, product_id)
    variation = ProductVariation(product_id=product_id, **body.model_dump())
    await products.add(variation)
    return VariationSchema.model_validate(variation)


@router.patch("/variations/{variation_id}", response_model=VariationSchema)
async def update_variation(
    variation_id: UUID,
    body: VariationUpdate,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
) -> VariationSchema:
    variation = await products.get_variation_by_id(variation_id)
    if variation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Variation not found")
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(variation, field, value)
    await products.flush()
    return VariationSchema.model_validate(variation)


@router.delete("/variations/{variation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_variation(
    variation_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
) -> None:
    variation = await products.get_variation_by_id(variation_id)
    if variation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Variation not found")
    await products.delete(variation)


@router.get(
    "/inventory",
    response_model=InventoryResponse,
    summary="Inventory dashboard",
    description="Sales over completed orders, stock valuation, low-stock count and the filtered product list.",
)
async def inventory(
    search: Optional[str] = None,
    category: Optional[str] = None,
    stock: StockFilter = StockFilter.ALL,
    current_user: User = require_role(UserRole.ADMIN),
    products: ProductRepository = Depends(get_product_repo),
    orders: OrderRepository = Depends(get_order_repo),
) -> InventoryResponse:
    threshold = get_settings().low_stock_threshold
    all_products = await products.get_all_products_with_variations(include_unavailable=True)
    completed = await orders.list_by_status(OrderStatus.COMPLETED)
    stats = compute_stats(completed, all_products, threshold)
    filtered = filter_products(
        all_products,
        search=search,
        category=category,
        stock=stock,
        low_stock_threshold=threshold,
    )
    return InventoryResponse(
        stats=InventoryStatsSchema(**asdict(stats)),
        products=[product_to_schema(p) for p in filtered],
    )
