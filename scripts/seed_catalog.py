#!/usr/bin/env python3
"""
Seed categories and a starter peptide catalog with vial-size variations.
Idempotent: existing categories and products (matched by id / name) are left alone.
Run after migrations: python -m scripts.seed_catalog
"""
from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import select

from peptide_store.db import session_scope
from peptide_store.models import Category, Product, ProductVariation
from peptide_store.repositories.category_repo import CategoryRepository

# (id, name, icon, sort_order)
CATEGORIES = [
    ("weight-management", "Weight Management", "⚖️", 1),
    ("recovery-repair", "Recovery & Repair", "🩹", 2),
    ("longevity", "Longevity", "🧬", 3),
]

# (name, category, base_price, stock, [(variation_name, quantity_mg, price, stock), ...])
CATALOG = [
    ("Tirzepatide", "weight-management", "120.00", 0, [("5mg", "5", "120.00", 15), ("10mg", "10", "210.00", 8)]),
    ("Semaglutide", "weight-management", "95.00", 0, [("2mg", "2", "95.00", 20), ("5mg", "5", "180.00", 10)]),
    ("BPC-157", "recovery-repair", "45.00", 40, []),
    ("TB-500", "recovery-repair", "55.00", 25, []),
    ("Epitalon", "longevity", "60.00", 12, []),
]


async def seed() -> None:
    async with session_scope() as session:
        categories = CategoryRepository(session)
        for category_id, name, icon, sort_order in CATEGORIES:
            if await categories.get(category_id) is None:
                await categories.add(Category(id=category_id, name=name, icon=icon, sort_order=sort_order, active=True))

        existing = set((await session.execute(select(Product.name))).scalars())
        for name, category, base_price, stock, variations in CATALOG:
            if name in existing:
                continue
            session.add(
                Product(
                    name=name,
                    category=category,
                    base_price=Decimal(base_price),
                    stock_quantity=stock,
                    variations=[
                        ProductVariation(name=v_name, quantity_mg=Decimal(mg), price=Decimal(price), stock_quantity=v_stock)
                        for v_name, mg, price, v_stock in variations
                    ],
                )
            )
    print(f"Catalog seeded: {len(CATEGORIES)} categories, {len(CATALOG)} products checked.")


if __name__ == "__main__":
    asyncio.run(seed())
