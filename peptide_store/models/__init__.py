from peptide_store.models.user import User, UserRole
from peptide_store.models.category import Category
from peptide_store.models.product import Product, ProductVariation
from peptide_store.models.order import Order, OrderItem, OrderStatus
from peptide_store.models.testimonial import Testimonial

__all__ = [
    "User",
    "UserRole",
    "Category",
    "Product",
    "ProductVariation",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Testimonial",
]
