"""
Tests for the checkout adapter
"""
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

import checkout
from cart import LineItem


def test_checkout_items_are_price_references(cart, gin_set):
    cart.add(gin_set, 2)
    cart.add(LineItem(id="B", name="B", price=Decimal("10"), price_ref="price_B"))

    assert checkout.checkout_items(cart) == [
        {"price": "price_A", "quantity": 2},
        {"price": "price_B", "quantity": 1},
    ]


def test_checkout_items_empty_cart(cart):
    assert checkout.checkout_items(cart) == []


@pytest.mark.parametrize("items", [
    None,
    [],
    "price_A",
    [{"quantity": 1}],
    [{"price": "", "quantity": 1}],
    [{"price": "price_A", "quantity": 0}],
    [{"price": "price_A", "quantity": "2"}],
    [{"price": "price_A", "quantity": True}],
    ["price_A"],
])
def test_validate_items_rejects_bad_payloads(items):
    with pytest.raises(checkout.CheckoutError):
        checkout.validate_items(items)


def test_session_params():
    items = [{"price": "price_A", "quantity": 1}]
    params = checkout.session_params(items, "https://shop.example")

    assert params["line_items"] == items
    assert params["mode"] == "payment"
    assert params["payment_method_types"] == ["card"]
    assert params["success_url"] == "https://shop.example/success?session_id={CHECKOUT_SESSION_ID}"
    assert params["cancel_url"] == "https://shop.example/cart"
    assert params["shipping_address_collection"] == {"allowed_countries": ["GB", "US", "CA", "AU"]}

    rate = params["shipping_options"][0]["shipping_rate_data"]
    assert rate["fixed_amount"] == {"amount": 0, "currency": "gbp"}
    assert rate["delivery_estimate"]["minimum"]["value"] == 3
    assert rate["delivery_estimate"]["maximum"]["value"] == 5


def test_create_session_calls_stripe():
    items = [{"price": "price_A", "quantity": 2}]
    with patch("stripe.checkout.Session.create", return_value=SimpleNamespace(id="cs_test_1")) as create:
        result = checkout.create_session(items, "https://shop.example")

    assert result.id == "cs_test_1"
    assert create.call_args.kwargs["line_items"] == items


def test_create_session_validates_before_calling_stripe():
    with patch("stripe.checkout.Session.create") as create:
        with pytest.raises(checkout.CheckoutError):
            checkout.create_session([], "https://shop.example")
    create.assert_not_called()
