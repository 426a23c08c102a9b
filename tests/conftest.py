"""
Pytest fixtures: in-memory store doubles for the repositories, and an ASGI test client
with the repository and auth dependencies overridden. No database is required.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from peptide_store.models import (
    Category,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductVariation,
    Testimonial,
    User,
    UserRole,
)


class InMemoryStore:
    """Rows for every table the repositories touch, plus failure injection by method name."""

    def __init__(self) -> None:
        self.products: dict[UUID, Product] = {}
        self.variations: dict[UUID, ProductVariation] = {}
        self.orders: dict[UUID, Order] = {}
        self.categories: dict[str, Category] = {}
        self.testimonials: dict[UUID, Testimonial] = {}
        self.fail_on: set[str] = set()
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise SQLAlchemyError(f"simulated failure in {operation}")

    def tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def snapshot(self) -> tuple[dict, dict, dict]:
        """Order statuses and stock counters, for undoing an uncommitted unit of work."""
        return (
            {oid: (o.status, o.confirmed_at, o.completed_at) for oid, o in self.orders.items()},
            {pid: p.stock_quantity for pid, p in self.products.items()},
            {vid: v.stock_quantity for vid, v in self.variations.items()},
        )

    def restore(self, snapshot: tuple[dict, dict, dict]) -> None:
        orders, products, variations = snapshot
        for oid, (status, confirmed_at, completed_at) in orders.items():
            order = self.orders[oid]
            order.status, order.confirmed_at, order.completed_at = status, confirmed_at, completed_at
        for pid, qty in products.items():
            self.products[pid].stock_quantity = qty
        for vid, qty in variations.items():
            self.variations[vid].stock_quantity = qty

    # Seed helpers

    def add_category(self, category_id: str = "recovery-repair", name: str = "Recovery & Repair",
                     sort_order: int = 1, active: bool = True) -> Category:
        category = Category(id=category_id, name=name, icon="🧪", sort_order=sort_order, active=active)
        self.categories[category_id] = category
        return category

    def add_product(
        self,
        name: str = "BPC-157",
        stock: int = 10,
        base_price: str = "45.00",
        category: str = "recovery-repair",
        available: bool = True,
        featured: bool = False,
        discount_price: Optional[str] = None,
        discount_active: bool = False,
        description: str = "",
    ) -> Product:
        product = Product(
            id=uuid4(),
            name=name,
            description=description,
            category=category,
            base_price=Decimal(base_price),
            discount_price=Decimal(discount_price) if discount_price is not None else None,
            discount_start_date=None,
            discount_end_date=None,
            discount_active=discount_active,
            purity_percentage=Decimal("99.00"),
            storage_conditions="Store at -20°C",
            stock_quantity=stock,
            available=available,
            featured=featured,
            image_url=f"https://cdn.example.com/{name.lower()}.png",
        )
        self.products[product.id] = product
        return product

    def add_variation(self, product: Product, name: str = "5mg", quantity_mg: str = "5",
                      price: str = "120.00", stock: int = 10) -> ProductVariation:
        variation = ProductVariation(
            id=uuid4(),
            product_id=product.id,
            name=name,
            quantity_mg=Decimal(quantity_mg),
            price=Decimal(price),
            stock_quantity=stock,
        )
        product.variations.append(variation)
        self.variations[variation.id] = variation
        return variation

    def add_order(
        self,
        lines: list[tuple[Product, Optional[ProductVariation], int]],
        status: OrderStatus = OrderStatus.PENDING,
    ) -> Order:
        order_id = uuid4()
        items = []
        for product, variation, quantity in lines:
            unit_price = variation.price if variation is not None else product.base_price
            items.append(
                OrderItem(
                    id=uuid4(),
                    order_id=order_id,
                    product_id=product.id,
                    product=product,
                    product_name=product.name,
                    product_price=product.base_price,
                    variation_id=variation.id if variation is not None else None,
                    variation_name=variation.name if variation is not None else None,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=unit_price * quantity,
                )
            )
        order = Order(
            id=order_id,
            customer_name="Ada Lovelace",
            customer_email="ada@example.com",
            customer_phone="+1 555 0100",
            shipping_address="12 Analytical St",
            shipping_city="London",
            shipping_state="Greater London",
            shipping_zip_code="N1 9GU",
            shipping_country="UK",
            total_amount=sum((i.total_price for i in items), Decimal("0")),
            shipping_fee=Decimal("0"),
            status=status,
            created_at=self.tick(),
            items=items,
        )
        self.orders[order.id] = order
        return order

    def add_testimonial(self, title: str, display_order: int, active: bool = True) -> Testimonial:
        testimonial = Testimonial(
            id=uuid4(),
            title=title,
            description=None,
            image_url=f"https://cdn.example.com/{title}.jpg",
            display_order=display_order,
            active=active,
        )
        self.testimonials[testimonial.id] = testimonial
        return testimonial


class FakeOrderRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self._uncommitted = None

    async def add(self, order: Order) -> Order:
        self.store.check("orders.add")
        order.id = order.id or uuid4()
        order.created_at = self.store.tick()
        for item in order.items:
            item.id = item.id or uuid4()
            item.order_id = order.id
        self.store.orders[order.id] = order
        return order

    async def list_with_items(self) -> list[Order]:
        self.store.check("orders.list_with_items")
        return sorted(self.store.orders.values(), key=lambda o: o.created_at, reverse=True)

    async def list_by_status(self, status: OrderStatus) -> list[Order]:
        return [o for o in await self.list_with_items() if o.status == status]

    async def get_by_id(self, order_id: UUID) -> Order | None:
        self.store.check("orders.get_by_id")
        return self.store.orders.get(order_id)

    async def transition(self, order_id, sources, target, **values) -> bool:
        self.store.check("orders.transition")
        order = self.store.orders.get(order_id)
        if order is None or order.status not in tuple(sources):
            return False
        if self._uncommitted is None:
            self._uncommitted = self.store.snapshot()
        order.status = target
        for field, value in values.items():
            setattr(order, field, value)
        return True

    async def commit(self) -> None:
        self.store.check("orders.commit")
        self._uncommitted = None

    async def rollback(self) -> None:
        if self._uncommitted is not None:
            self.store.restore(self._uncommitted)
            self._uncommitted = None


class FakeProductRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_all_products_with_variations(self, *, include_unavailable=False, category=None) -> list[Product]:
        rows = [
            p for p in self.store.products.values()
            if (include_unavailable or p.available) and (category is None or p.category == category)
        ]
        return sorted(rows, key=lambda p: (not p.featured, p.name))

    async def get_product_by_id(self, product_id: UUID) -> Product | None:
        return self.store.products.get(product_id)

    async def get_variation_by_id(self, variation_id: UUID) -> ProductVariation | None:
        return self.store.variations.get(variation_id)

    async def count_in_category(self, category_id: str) -> int:
        return sum(1 for p in self.store.products.values() if p.category == category_id)

    async def add(self, obj) -> None:
        obj.id = obj.id or uuid4()
        if isinstance(obj, Product):
            self.store.products[obj.id] = obj
            for v in obj.variations:
                v.id = v.id or uuid4()
                v.product_id = obj.id
                self.store.variations[v.id] = v
        else:
            self.store.variations[obj.id] = obj
            parent = self.store.products.get(obj.product_id)
            if parent is not None and obj not in parent.variations:
                parent.variations.append(obj)

    async def delete(self, obj) -> None:
        if isinstance(obj, Product):
            for v in obj.variations:
                self.store.variations.pop(v.id, None)
            self.store.products.pop(obj.id, None)
        else:
            self.store.variations.pop(obj.id, None)
            parent = self.store.products.get(obj.product_id)
            if parent is not None:
                parent.variations.remove(obj)

    async def flush(self) -> None:
        pass

    async def get_product_stock(self, product_id: UUID) -> int | None:
        self.store.check("get_product_stock")
        product = self.store.products.get(product_id)
        return product.stock_quantity if product is not None else None

    async def set_product_stock(self, product_id: UUID, stock_quantity: int) -> None:
        self.store.check("set_product_stock")
        self.store.products[product_id].stock_quantity = stock_quantity

    async def get_variation_stock(self, variation_id: UUID) -> int | None:
        self.store.check("get_variation_stock")
        variation = self.store.variations.get(variation_id)
        return variation.stock_quantity if variation is not None else None

    async def set_variation_stock(self, variation_id: UUID, stock_quantity: int) -> None:
        self.store.check("set_variation_stock")
        self.store.variations[variation_id].stock_quantity = stock_quantity

    @asynccontextmanager
    async def savepoint(self):
        """Restore every stock counter if the block raises, like a rolled-back savepoint."""
        snapshot = (
            {pid: p.stock_quantity for pid, p in self.store.products.items()},
            {vid: v.stock_quantity for vid, v in self.store.variations.items()},
        )
        try:
            yield
        except Exception:
            for pid, qty in snapshot[0].items():
                self.store.products[pid].stock_quantity = qty
            for vid, qty in snapshot[1].items():
                self.store.variations[vid].stock_quantity = qty
            raise


class FakeCategoryRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def list_all(self, *, active_only: bool = False) -> list[Category]:
        rows = [c for c in self.store.categories.values() if c.active or not active_only]
        return sorted(rows, key=lambda c: (c.sort_order, c.name))

    async def get(self, category_id: str) -> Category | None:
        return self.store.categories.get(category_id)

    async def max_sort_order(self) -> int | None:
        return max((c.sort_order for c in self.store.categories.values()), default=None)

    async def add(self, category: Category) -> Category:
        self.store.categories[category.id] = category
        return category

    async def delete(self, category: Category) -> None:
        del self.store.categories[category.id]

    async def flush(self) -> None:
        pass


class FakeTestimonialRepository:
    __test__ = False

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def list_all(self, *, active_only: bool = False) -> list[Testimonial]:
        rows = [t for t in self.store.testimonials.values() if t.active or not active_only]
        return sorted(rows, key=lambda t: t.display_order)

    async def get(self, testimonial_id: UUID) -> Testimonial | None:
        return self.store.testimonials.get(testimonial_id)

    async def max_display_order(self) -> int | None:
        return max((t.display_order for t in self.store.testimonials.values()), default=None)

    async def add(self, testimonial: Testimonial) -> Testimonial:
        testimonial.id = testimonial.id or uuid4()
        self.store.testimonials[testimonial.id] = testimonial
        return testimonial

    async def delete(self, testimonial: Testimonial) -> None:
        del self.store.testimonials[testimonial.id]

    async def flush(self) -> None:
        pass


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_category("recovery-repair", "Recovery & Repair", sort_order=1)
    store.add_category("weight-management", "Weight Management", sort_order=2)
    return store


@pytest.fixture
def order_repo(store: InMemoryStore) -> FakeOrderRepository:
    return FakeOrderRepository(store)


@pytest.fixture
def product_repo(store: InMemoryStore) -> FakeProductRepository:
    return FakeProductRepository(store)


@pytest.fixture
def admin_user() -> User:
    return User(id=uuid4(), email="admin@example.com", hashed_password="x", role=UserRole.ADMIN)


def _override_dependencies(app, store: InMemoryStore) -> None:
    from peptide_store.api import deps

    app.dependency_overrides[deps.get_order_repo] = lambda: FakeOrderRepository(store)
    app.dependency_overrides[deps.get_product_repo] = lambda: FakeProductRepository(store)
    app.dependency_overrides[deps.get_category_repo] = lambda: FakeCategoryRepository(store)
    app.dependency_overrides[deps.get_testimonial_repo] = lambda: FakeTestimonialRepository(store)


@pytest_asyncio.fixture
async def client(store: InMemoryStore, admin_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as an admin."""
    from peptide_store.core.auth import get_current_user
    from peptide_store.main import app

    _override_dependencies(app, store)
    app.dependency_overrides[get_current_user] = lambda: admin_user
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anon_client(store: InMemoryStore) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials (storefront visitor)."""
    from peptide_store.main import app

    _override_dependencies(app, store)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
