"""
GET /api/v1/products: public catalog with variations and current (discount-aware) prices.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from peptide_store.api.deps import get_product_repo
from peptide_store.models.product import Product
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.schemas.catalog import CatalogResponse, ProductSchema, VariationSchema
from peptide_store.services.catalog import effective_price

router = APIRouter(prefix="/products", tags=["catalog"])

_DERIVED_FIELDS = ("current_price", "variations")


def product_to_schema(product: Product) -> ProductSchema:
    data = {name: getattr(product, name) for name in ProductSchema.model_fields if name not in _DERIVED_FIELDS}
    return ProductSchema(
        **data,
        current_price=effective_price(product),
        variations=[VariationSchema.model_validate(v) for v in product.variations],
    )


@router.get(
    "",
    response_model=CatalogResponse,
    summary="List products",
    description="Available products (featured first, then by name) with variations; optional category filter.",
)
async def list_products(
    category: Optional[str] = None,
    products: ProductRepository = Depends(get_product_repo),
) -> CatalogResponse:
    rows = await products.get_all_products_with_variations(category=category)
    return CatalogResponse(products=[product_to_schema(p) for p in rows])


@router.get("/{product_id}", response_model=ProductSchema, summary="Get product")
async def get_product(
    product_id: UUID,
    products: ProductRepository = Depends(get_product_repo),
) -> ProductSchema:
    product = await products.get_product_by_id(product_id)
    if product is None or not product.available:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product_to_schema(product)
