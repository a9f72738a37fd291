"""
Fireworks storefront - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and sets up logging
2. Creates the commerce API client (shared, token looked up per request)
3. Creates the checkout, payment and auth services
4. Registers route blueprints
5. Sets up error handlers and CLI commands

ARCHITECTURE:
    Browser session (signed cookie)
    ├── auth-storage  - AuthState record (survives server restarts)
    ├── cart          - CartState
    └── orders        - OrderState (read cache of placed orders)

    Commerce API (remote collaborator)
    └── catalog, orders, auth - reached only through CommerceAPIClient

State is committed to the session only after collaborator calls succeed.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from flask import Flask, jsonify

from logging_config import setup_logging, get_logger
from core.api_client import CommerceAPIClient
from core.exceptions import CommerceAPIError
from core.storage import JsonFileStorage
from models.session import AuthState
from routes import register_blueprints
from services.auth_service import AuthService
from services.checkout_service import CheckoutService
from services.payment_service import PaymentSimulator
from services.session_state import current_token


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In a frozen bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str = "config.Config", api_client: CommerceAPIClient = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the config class to load
        api_client: Prebuilt commerce API client (tests pass a mock)

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting fireworks storefront in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # COMMERCE API CLIENT
    # =========================================================================

    if api_client is None:
        api_client = CommerceAPIClient(
            base_url=app.config["COMMERCE_API_URL"],
            timeout=app.config["COMMERCE_API_TIMEOUT"],
            token_provider=current_token,
        )
        atexit.register(api_client.close)
        logger.info(f"Commerce API: {api_client.base_url}")

    app.config["API_CLIENT"] = api_client

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    app.config["CHECKOUT_SERVICE"] = CheckoutService(api_client)
    app.config["PAYMENT_SERVICE"] = PaymentSimulator(
        delay_seconds=app.config.get("PAYMENT_DELAY_SECONDS", 3.0)
    )
    app.config["AUTH_SERVICE"] = AuthService(api_client)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"view": "not_found", "not_found": True, "message": "Page not found."}), 404

    @app.errorhandler(CommerceAPIError)
    def handle_api_error(e):
        # Routes catch collaborator failures themselves; this is the backstop
        logger.error(f"Unhandled commerce API error: {e}")
        return jsonify({"view": "error", "message": e.message}), 502

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({"view": "error", "message": "An unexpected error occurred. Please try again."}), 500

    _register_cli(app)

    logger.info("Application initialized successfully")
    return app


# =============================================================================
# CLI
# =============================================================================

def _register_cli(app: Flask) -> None:
    """
    Session commands for use outside a browser.

    They keep the session record in the JSON file at AUTH_STORAGE_PATH, so
    a sign-in survives between invocations.
    """

    def cli_auth() -> AuthState:
        return AuthState(JsonFileStorage(app.config["AUTH_STORAGE_PATH"]))

    @app.cli.command("login")
    @click.argument("email")
    @click.option("--password", prompt=True, hide_input=True)
    @click.option("--admin", is_flag=True, help="Use the administrator entry point.")
    def login_command(email, password, admin):
        """Sign in and persist the session."""
        auth = cli_auth()
        try:
            user = app.config["AUTH_SERVICE"].login(auth, email, password, admin=admin)
        except CommerceAPIError as e:
            raise click.ClickException(e.message)
        click.echo(f"Signed in as {user.full_name or user.email} (admin={auth.is_admin})")

    @app.cli.command("logout")
    def logout_command():
        """Clear the persisted session."""
        cli_auth().logout()
        click.echo("Signed out")

    @app.cli.command("whoami")
    def whoami_command():
        """Show the persisted session."""
        auth = cli_auth()
        if not auth.is_authenticated:
            click.echo("Not signed in")
            return
        click.echo(f"{auth.user.full_name} <{auth.user.email}> role={auth.user.role}")


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
