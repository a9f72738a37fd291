"""
Authentication routes.

Handles:
- /login - Customer sign-in
- /admin/login - Administrator sign-in (separate entry point)
- /register - Account creation
- /logout - Sign out

A rejected sign-in or registration is shown as a notification and leaves
the session exactly as it was.
"""

from flask import Blueprint, flash, redirect, request, session, url_for

from core.exceptions import CommerceAPIError, ValidationError
from routes.common import form_data, render_view, safe_next, service
from services.session_state import ORDERS_KEY, load_auth
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)


def _login(admin: bool):
    view = "admin_login" if admin else "login"
    fallback = url_for("admin.dashboard") if admin else url_for("main.index")
    next_url = safe_next(request.args.get("next"), fallback)

    if request.method == "GET":
        return render_view(view, next=next_url)

    data = form_data()
    email = str(data.get("email") or "")
    password = str(data.get("password") or "")

    if not email.strip() or not password:
        flash("Email and password are required.", "error")
        return render_view(view, status=400, next=next_url)

    auth_service = service("AUTH_SERVICE")

    try:
        user = auth_service.login(load_auth(), email, password, admin=admin)
    except CommerceAPIError as e:
        logger.info(f"Sign-in rejected for {email.strip()}: {e.message}")
        flash(e.message or "Invalid credentials. Please try again.", "error")
        return render_view(view, status=401, next=next_url)

    # Keep the cookie past browser restarts for PERMANENT_SESSION_LIFETIME
    session.permanent = True
    flash(f"Welcome back, {user.first_name}!", "success")
    return redirect(next_url)


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    return _login(admin=False)


@auth_bp.route("/admin/login", methods=["GET", "POST"])
def admin_login():
    return _login(admin=True)


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "GET":
        return render_view("register")

    auth_service = service("AUTH_SERVICE")

    try:
        auth_service.register(load_auth(), form_data())
    except ValidationError as e:
        flash(e.message, "error")
        return render_view("register", status=400, errors=e.errors)
    except CommerceAPIError as e:
        logger.info(f"Registration rejected: {e.message}")
        flash(e.message or "Registration failed. Please try again.", "error")
        return render_view("register", status=400, errors={})

    session.permanent = True
    flash("Registration successful!", "success")
    return redirect(url_for("main.index"))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    load_auth().logout()
    session.pop(ORDERS_KEY, None)
    flash("Logged out successfully", "success")
    return redirect(url_for("main.index"))
