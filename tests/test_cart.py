from __future__ import annotations

from decimal import Decimal

import pytest

from odx_client_sdk.cart import Cart


def test_cart_keeps_order_and_duplicates(make_product) -> None:
    pen = make_product(1, "2.50", "Pen")
    ink = make_product(2, "7.25", "Ink")
    cart = Cart()
    cart.add(pen)
    cart.add(ink)
    cart.add(pen)

    assert [item.name for item in cart] == ["Pen", "Ink", "Pen"]
    assert len(cart) == 3
    assert cart.total == Decimal("12.25")
    assert cart.items == (pen, ink, pen)


def test_cart_remove_and_clear(make_product) -> None:
    cart = Cart([make_product(1, "1.00"), make_product(2, "2.00")])
    removed = cart.remove(0)
    assert removed.id == 1
    assert cart.total == Decimal("2.00")
    cart.clear()
    assert cart.is_empty
    assert cart.total == Decimal("0")
    with pytest.raises(IndexError):
        cart.remove(0)


def test_cart_render(make_product) -> None:
    cart = Cart([make_product(3, "4.00", "Mug")])
    assert cart.render() == {"count": 1, "total": Decimal("4.00"), "rows": ["Mug (Ref: P3) - $4.00"]}


def test_items_snapshot_is_detached(make_product) -> None:
    cart = Cart([make_product(1, "1.00")])
    snapshot = cart.items
    cart.clear()
    assert len(snapshot) == 1
