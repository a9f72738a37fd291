"""
Shared view helpers and access guards.

Views answer with a JSON view-state payload. Every payload carries the
pending flash notifications and a small session summary (cart badge count,
signed-in user) so a front end can render any page from one response.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import (
    current_app,
    flash,
    get_flashed_messages,
    jsonify,
    redirect,
    request,
    url_for,
)

from services.session_state import load_auth, load_cart


def render_view(view: str, status: int = 200, **payload: Any):
    """JSON response for ``view`` with notifications and session summary."""
    auth = load_auth()
    body: Dict[str, Any] = {
        "view": view,
        "notifications": [
            {"category": category, "message": message}
            for category, message in get_flashed_messages(with_categories=True)
        ],
        "session": {
            "is_authenticated": auth.is_authenticated,
            "is_admin": auth.is_admin,
            "user": auth.user.to_dict() if auth.user else None,
            "cart_count": load_cart().get_item_count(),
        },
    }
    body.update(payload)
    return jsonify(body), status


def render_not_found(resource: str, identifier: Any):
    """Explicit not-found view state (distinct from a network failure)."""
    return render_view(
        "not_found",
        status=404,
        not_found=True,
        resource=resource,
        identifier=str(identifier),
    )


def form_data() -> Dict[str, Any]:
    """Submitted fields from a JSON body or an HTML form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def safe_next(target: Optional[str], fallback: str) -> str:
    """Only follow local redirect targets."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return fallback


def service(name: str):
    """Fetch a service registered on the app config."""
    return current_app.config[name]


# =============================================================================
# GUARDS
# =============================================================================

def login_required(view):
    """Redirect anonymous sessions to the customer login."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if not load_auth().is_authenticated:
            flash("Please login to continue", "error")
            return redirect(url_for("auth.login", next=request.path))
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    """
    Admin-only area.

    Anonymous sessions go to the admin login; signed-in customers are sent
    back to the storefront home.
    """

    @wraps(view)
    def wrapped(*args, **kwargs):
        auth = load_auth()
        if not auth.is_authenticated:
            flash("Please login to continue", "error")
            return redirect(url_for("auth.admin_login", next=request.path))
        if not auth.is_admin:
            flash("Admin access required", "error")
            return redirect(url_for("main.index"))
        return view(*args, **kwargs)

    return wrapped
