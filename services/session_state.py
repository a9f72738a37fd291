"""
Per-browser commerce state.

The three state containers are rebuilt from the Flask session at the start
of each request and written back explicitly after a mutation, the same way
the rest of the app treats ``session`` as its store:

    cart = load_cart()
    cart.add_item(product, 2)
    save_cart(cart)

AuthState writes through to the session on its own (it persists on every
mutation), so there is no save_auth().
"""

from __future__ import annotations

from typing import Optional

from flask import has_request_context, session

from models.cart import CartState
from models.order import OrderState
from models.session import AuthState


CART_KEY = "cart"
ORDERS_KEY = "orders"


def load_cart() -> CartState:
    return CartState.from_dict(session.get(CART_KEY))


def save_cart(cart: CartState) -> None:
    session[CART_KEY] = cart.to_dict()
    session.modified = True


def load_auth() -> AuthState:
    return AuthState(session)


def load_orders() -> OrderState:
    return OrderState.from_dict(session.get(ORDERS_KEY))


def save_orders(orders: OrderState) -> None:
    session[ORDERS_KEY] = orders.to_dict()
    session.modified = True


def current_token() -> Optional[str]:
    """Bearer token of the session behind the current request, if any."""
    if not has_request_context():
        return None
    return load_auth().token
