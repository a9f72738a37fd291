"""
Authentication flows: login, admin login, registration.

The collaborator checks credentials; this service only forwards them and,
on success, records the result in AuthState. A rejected login or
registration raises before AuthState is touched.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from core.api_client import CommerceAPIClient
from core.exceptions import ValidationError
from models.session import AuthState, User
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def validate_registration(form: Mapping[str, Any]) -> Dict[str, str]:
    """Checks done before the collaborator sees a registration."""
    errors: Dict[str, str] = {}

    password = str(form.get("password") or "")
    if password != str(form.get("confirm_password") or ""):
        errors["confirm_password"] = "Passwords do not match!"
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters!"

    return errors


class AuthService:
    """
    Forwards credentials to the commerce API and records the session.

    Attributes:
        api_client: CommerceAPIClient used for the auth endpoints
    """

    def __init__(self, api_client: CommerceAPIClient):
        self.api_client = api_client

    def login(self, auth: AuthState, email: str, password: str, admin: bool = False) -> User:
        """
        Sign in through the customer or the admin entry point.

        Raises:
            CommerceAPIError: If the collaborator rejects the credentials
        """
        credentials = {"email": email.strip(), "password": password}

        if admin:
            result = self.api_client.admin_login(credentials)
        else:
            result = self.api_client.login(credentials)

        auth.login(result.user, result.token)
        return result.user

    def register(self, auth: AuthState, form: Mapping[str, Any]) -> User:
        """
        Create an account and sign in with it.

        Raises:
            ValidationError: If passwords differ or are too short
            CommerceAPIError: If the collaborator rejects the registration
        """
        errors = validate_registration(form)
        if errors:
            raise ValidationError(errors, next(iter(errors.values())))

        payload = {
            "firstName": str(form.get("first_name") or "").strip(),
            "lastName": str(form.get("last_name") or "").strip(),
            "email": str(form.get("email") or "").strip(),
            "password": str(form.get("password") or ""),
            "phone": str(form.get("phone") or "").strip(),
        }

        result = self.api_client.register(payload)
        auth.login(result.user, result.token)

        logger.info(f"Registered new account {result.user.email}")
        return result.user
