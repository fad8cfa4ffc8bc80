"""Tests for buyable helpers"""
from decimal import Decimal

import pytest

from shopping_cart.domain.buyable import (
    Buyable,
    add_to_cart,
    buyable_key,
    buyable_type_of,
    cart_item,
    in_cart,
    remove_from_cart,
    snapshot_buyable,
)
from shopping_cart.domain.cart import Cart

from tests.conftest import Product


class GiftCard:
    def __init__(self, id, price):
        self.id = id
        self.name = "Gift card"
        self.price = price
        self.tax_rate = Decimal("0")


@pytest.fixture
def cart(session_storage, config):
    return Cart(session_storage, "sess-1", config=config)


def test_protocol_check(keyboard):
    assert isinstance(keyboard, Buyable)
    assert not isinstance(object(), Buyable)


def test_type_defaults_to_class_name():
    assert buyable_type_of(GiftCard(1, 10)) == "GiftCard"
    assert buyable_type_of(Product(id=1, name="x", price=Decimal("1"))) == "product"


def test_key_of_mapping_and_object(keyboard):
    assert buyable_key(keyboard) == ("product", 1)
    assert buyable_key({"buyable_type": "product", "buyable_id": "4"}) == ("product", 4)


def test_snapshot_of_object_copies_tax_rate():
    data = snapshot_buyable(GiftCard(5, 25), 2, {"design": "birthday"})

    assert data == {
        "buyable_type": "GiftCard",
        "buyable_id": 5,
        "name": "Gift card",
        "price": 25,
        "quantity": 2,
        "attributes": {"design": "birthday"},
        "tax_rate": Decimal("0"),
    }


def test_cart_helpers(cart, keyboard, mouse):
    item = add_to_cart(cart, keyboard, 2)

    assert in_cart(cart, keyboard)
    assert not in_cart(cart, mouse)
    assert cart_item(cart, keyboard) is item

    assert remove_from_cart(cart, keyboard) is True
    assert not in_cart(cart, keyboard)
    assert remove_from_cart(cart, keyboard) is False
