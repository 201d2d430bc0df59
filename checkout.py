import stripe

ALLOWED_COUNTRIES = ["GB", "US", "CA", "AU"]

# Free standard delivery
SHIPPING_RATE = {
    "type": "fixed_amount",
    "fixed_amount": {"amount": 0, "currency": "gbp"},
    "display_name": "Standard Delivery",
    "delivery_estimate": {
        "minimum": {"unit": "business_day", "value": 3},
        "maximum": {"unit": "business_day", "value": 5},
    },
}


class CheckoutError(ValueError):
    pass


def checkout_items(cart):
    """Stripe line items for every line in the cart, in cart order."""
    return [{"price": item.price_ref, "quantity": item.quantity} for item in cart]


def validate_items(items):
    if not isinstance(items, list) or not items:
        raise CheckoutError("Cart is empty")

    for item in items:
        if not isinstance(item, dict):
            raise CheckoutError(f"Invalid line item {item!r}")
        price = item.get("price")
        quantity = item.get("quantity")
        if not isinstance(price, str) or not price:
            raise CheckoutError(f"Line item is missing a price reference: {item!r}")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise CheckoutError(f"Invalid quantity for {price}: {quantity!r}")
    return items


def session_params(items, domain):
    return {
        "payment_method_types": ["card"],
        "line_items": items,
        "mode": "payment",
        "success_url": f"{domain}/success?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{domain}/cart",
        "shipping_address_collection": {"allowed_countries": list(ALLOWED_COUNTRIES)},
        "shipping_options": [{"shipping_rate_data": SHIPPING_RATE}],
    }


def create_session(items, domain):
    return stripe.checkout.Session.create(**session_params(validate_items(items), domain))
