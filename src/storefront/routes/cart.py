from decimal import Decimal

from flask import Blueprint, jsonify, session

from storefront.models.product import Product
from storefront.repositories.session_store import FlaskSessionStore
from storefront.routes.schemas import (
    AddCartItemSchema, CartItemKeySchema, UpdateCartItemSchema
)
from storefront.routes.utils import load_json
from storefront.services.cart_service import CartService

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartItemSchema()
_key_schema = CartItemKeySchema()
_update_schema = UpdateCartItemSchema()


def _session_cart() -> CartService:
    """Cart bound to the caller's Flask session; hydrated once per request."""
    return CartService(FlaskSessionStore(session))


def _cart_response(cart: CartService, status: int = 200):
    return jsonify(cart.state.to_dict()), status


@cart_bp.route("", methods=["GET"])
def get_cart():
    return _cart_response(_session_cart())


@cart_bp.route("/items", methods=["POST"])
def add_item():
    """Add a product, merging with an existing line of the same size."""
    data = load_json(_add_schema)
    product_data = data["product"]
    product = Product(
        id=product_data["id"],
        name=product_data["name"],
        price=product_data["price"],
        promotion=Decimal(product_data["promotion"]),
        banner=product_data["banner"],
    )

    cart = _session_cart()
    cart.add_to_cart(product, data["quantity"], data["selected_size"])
    return _cart_response(cart, 201)


@cart_bp.route("/items", methods=["PATCH"])
def update_item():
    """Set a line's quantity; 0 or less removes it."""
    data = load_json(_update_schema)
    cart = _session_cart()
    cart.update_quantity(data["id"], data["selected_size"], data["quantity"])
    return _cart_response(cart)


@cart_bp.route("/items", methods=["DELETE"])
def remove_item():
    data = load_json(_key_schema)
    cart = _session_cart()
    cart.remove_from_cart(data["id"], data["selected_size"])
    return _cart_response(cart)


@cart_bp.route("", methods=["DELETE"])
def clear_cart():
    cart = _session_cart()
    cart.clear_cart()
    return _cart_response(cart)
