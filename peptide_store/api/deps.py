"""
Request-scoped store handles. Every router receives repositories (and the lifecycle
service built from them) through these dependencies, never a module-level client.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peptide_store.db import get_db
from peptide_store.repositories.category_repo import CategoryRepository
from peptide_store.repositories.order_repo import OrderRepository
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.repositories.testimonial_repo import TestimonialRepository
from peptide_store.services.order_lifecycle import OrderLifecycleService


def get_order_repo(session: AsyncSession = Depends(get_db)) -> OrderRepository:
    return OrderRepository(session)


def get_product_repo(session: AsyncSession = Depends(get_db)) -> ProductRepository:
    return ProductRepository(session)


def get_category_repo(session: AsyncSession = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(session)


def get_testimonial_repo(session: AsyncSession = Depends(get_db)) -> TestimonialRepository:
    return TestimonialRepository(session)


def get_order_lifecycle(
    orders: OrderRepository = Depends(get_order_repo),
    products: ProductRepository = Depends(get_product_repo),
) -> OrderLifecycleService:
    return OrderLifecycleService(orders, products)
