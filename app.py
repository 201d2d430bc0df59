import json
import logging
import os

import stripe
from flask import Flask, request, jsonify, session, flash, get_flashed_messages, g
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

import catalog
import checkout
from cart import Cart
from logger import setup_logger
from models import Base, CheckoutOrder

# Load env vars
load_dotenv()
stripe.api_key = os.getenv("STRIPE_SECRET_KEY")
WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
DOMAIN = os.getenv("DOMAIN", "http://localhost:4242")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///azu_spirits.db")
SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")

setup_logger(os.getenv("LOG_LEVEL", "INFO"), os.getenv("LOG_DIR"))
logger = logging.getLogger(__name__)

# Setup DB
engine = create_engine(DATABASE_URL)
Base.metadata.create_all(engine)
DBSession = sessionmaker(bind=engine)

# Flask app
app = Flask(__name__)
app.secret_key = SECRET_KEY


def _flash_confirmation(event):
    if event.action == "added":
        flash(f"{event.item.name} added to cart")


def get_cart():
    """Cart bound to the visitor's session, built once per request."""
    if "cart" not in g:
        g.cart = Cart(session)
        g.cart.subscribe(_flash_confirmation)
    return g.cart


def cart_response(cart, status=200):
    return jsonify({
        "items": cart.to_list(),
        "count": cart.count(),
        "total": f"{cart.total():.2f}",
        "messages": get_flashed_messages(),
    }), status


@app.errorhandler(405)
def method_not_allowed(e):
    response = jsonify({"error": "Method not allowed"})
    if e.valid_methods:
        response.headers["Allow"] = ", ".join(e.valid_methods)
    return response, 405


@app.route("/api/products")
def products():
    return jsonify({
        product_id: {**product, "price": str(product["price"])}
        for product_id, product in catalog.PRODUCTS.items()
    })


@app.route("/api/cart", methods=["GET"])
def show_cart():
    return cart_response(get_cart())


@app.route("/api/cart", methods=["DELETE"])
def clear_cart():
    cart = get_cart()
    cart.clear()
    return cart_response(cart)


@app.route("/api/cart/items", methods=["POST"])
def add_to_cart():
    data = request.get_json(silent=True) or {}
    product_id = data.get("id")
    quantity = data.get("quantity", 1)

    if not product_id:
        return jsonify({"error": "Product id is required"}), 400
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return jsonify({"error": "Quantity must be an integer"}), 400

    cart = get_cart()
    try:
        catalog.add_product(
            cart,
            product_id,
            name=data.get("name"),
            price=data.get("price"),
            image=data.get("image"),
            price_ref=data.get("priceId"),
            quantity=quantity,
        )
    except catalog.ProductNotFoundError as e:
        logger.error("No priceId found for %s", e.product_id)
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return cart_response(cart, 201)


@app.route("/api/cart/items/<item_id>", methods=["PATCH"])
def update_cart_item(item_id):
    data = request.get_json(silent=True) or {}
    quantity = data.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return jsonify({"error": "Quantity must be an integer"}), 400

    cart = get_cart()
    cart.set_quantity(item_id, quantity)
    return cart_response(cart)


@app.route("/api/cart/items/<item_id>", methods=["DELETE"])
def remove_cart_item(item_id):
    cart = get_cart()
    cart.remove(item_id)
    return cart_response(cart)


@app.route("/api/cart/checkout")
def cart_checkout_items():
    return jsonify({"items": checkout.checkout_items(get_cart())})


@app.route("/create-checkout-session", methods=["POST"])
def create_checkout_session():
    try:
        data = request.get_json(force=True)
        if not isinstance(data, dict):
            raise checkout.CheckoutError("Request body must be a JSON object")
        items = data.get("items")

        checkout_session = checkout.create_session(items, DOMAIN)
    except Exception as e:
        logger.exception("Error creating checkout session")
        return jsonify({"error": str(e)}), 500

    # Record the order as pending until Stripe reports it paid
    try:
        with DBSession() as db:
            db.add(CheckoutOrder(
                stripe_session_id=checkout_session.id,
                item_count=sum(item["quantity"] for item in items),
                line_items=json.dumps(items),
                status="pending",
            ))
            db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to record order for checkout session %s", checkout_session.id)

    logger.info("Created checkout session %s", checkout_session.id)
    response = jsonify({"id": checkout_session.id})
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


@app.route("/webhook", methods=["POST"])
def webhook_received():
    payload = request.data
    sig_header = request.headers.get("Stripe-Signature")
    try:
        event = stripe.Webhook.construct_event(payload, sig_header, WEBHOOK_SECRET)
    except Exception as e:
        logger.warning("Rejected webhook: %s", e)
        return jsonify({"error": "Invalid payload"}), 400

    if event["type"] == "checkout.session.completed":
        session_obj = event["data"]["object"]
        with DBSession() as db:
            order = db.query(CheckoutOrder).filter_by(stripe_session_id=session_obj["id"]).first()
            if order:
                order.status = "paid"
                db.commit()
                logger.info("Order %s marked as paid.", order.id)
            else:
                logger.warning("No order recorded for session %s", session_obj["id"])

    return "", 200


@app.route("/success")
def success():
    session_id = request.args.get("session_id")
    if not session_id:
        return jsonify({"error": "session_id is required"}), 400

    try:
        checkout_session = stripe.checkout.Session.retrieve(session_id)
    except Exception as e:
        logger.exception("Error retrieving checkout session %s", session_id)
        return jsonify({"error": str(e)}), 500

    cleared = checkout_session.payment_status == "paid"
    if cleared:
        get_cart().clear()

    return jsonify({
        "session_id": session_id,
        "payment_status": checkout_session.payment_status,
        "cleared": cleared,
    })


if __name__ == "__main__":
    app.run(port=4242, debug=True)
