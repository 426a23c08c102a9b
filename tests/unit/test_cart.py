"""
Unit tests: cart merging, stock clamping and totals.
"""
from decimal import Decimal

import pytest

from peptide_store.services.cart import Cart, OutOfStockError


def test_add_new_line_uses_current_price(store):
    product = store.add_product(base_price="45.00", stock=10)
    cart = Cart()

    notice = cart.add(product, quantity=2)

    assert notice is None
    assert len(cart.lines) == 1
    assert cart.lines[0].price == Decimal("45.00")
    assert cart.total_price() == Decimal("90.00")
    assert cart.total_items() == 2


def test_add_uses_variation_price(store):
    product = store.add_product(base_price="45.00", stock=0)
    vial = store.add_variation(product, price="120.00", stock=3)
    cart = Cart()

    cart.add(product, vial, 1)

    assert cart.lines[0].price == Decimal("120.00")


def test_add_out_of_stock_raises(store):
    product = store.add_product(stock=0)
    with pytest.raises(OutOfStockError):
        Cart().add(product)


def test_add_clamps_new_line_to_stock(store):
    product = store.add_product(stock=3)
    cart = Cart()

    notice = cart.add(product, quantity=5)

    assert cart.lines[0].quantity == 3
    assert notice == "Only 3 items available in stock. Adding 3 instead of 5."


def test_add_merges_same_product(store):
    product = store.add_product(stock=10)
    cart = Cart()

    cart.add(product, quantity=2)
    cart.add(product, quantity=3)

    assert len(cart.lines) == 1
    assert cart.lines[0].quantity == 5


def test_variations_are_separate_lines(store):
    product = store.add_product(stock=10)
    small = store.add_variation(product, name="5mg", stock=5)
    large = store.add_variation(product, name="10mg", quantity_mg="10", stock=5)
    cart = Cart()

    cart.add(product, small, 1)
    cart.add(product, large, 1)
    cart.add(product, None, 1)

    assert len(cart.lines) == 3


def test_merge_clamps_to_remaining_stock(store):
    product = store.add_product(stock=4)
    cart = Cart()
    cart.add(product, quantity=3)

    notice = cart.add(product, quantity=3)

    assert cart.lines[0].quantity == 4
    assert notice == "Only 4 items available in stock. Adding 1 instead of 3."


def test_merge_when_cart_already_holds_all_stock(store):
    product = store.add_product(stock=1)
    cart = Cart()
    cart.add(product)

    with pytest.raises(OutOfStockError, match="Only 1 item available in stock"):
        cart.add(product)
    assert cart.lines[0].quantity == 1


def test_update_quantity(store):
    product = store.add_product(stock=5)
    cart = Cart()
    cart.add(product)

    assert cart.update_quantity(0, 4) is None
    assert cart.lines[0].quantity == 4

    assert cart.update_quantity(0, 9) == "Only 5 items available in stock."
    assert cart.lines[0].quantity == 5

    cart.update_quantity(0, 0)
    assert cart.lines == []


def test_remove_and_clear(store):
    a = store.add_product(name="BPC-157")
    b = store.add_product(name="TB-500")
    cart = Cart()
    cart.add(a)
    cart.add(b)

    cart.remove(0)
    assert [line.product.name for line in cart.lines] == ["TB-500"]

    cart.clear()
    assert cart.total_price() == Decimal("0")
