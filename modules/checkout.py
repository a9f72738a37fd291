"""Checkout price computation and checkout form validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Mapping, Optional

import bleach


# Flat consumption tax on the subtotal
TAX_RATE = 0.18

# Subtotals strictly above this ship free; exactly 2000 still pays the fee
FREE_SHIPPING_THRESHOLD = 2000

SHIPPING_FEE = 99

REQUIRED_FIELDS = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "email": "Email is required",
    "phone": "Phone is required",
    "address": "Address is required",
    "city": "City is required",
    "state": "State is required",
    "pincode": "Pincode is required",
}

ADDRESS_FIELDS = list(REQUIRED_FIELDS) + ["landmark"]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")
PINCODE_PATTERN = re.compile(r"^[0-9]{6}$")


@dataclass(frozen=True)
class CheckoutTotals:
    """Subtotal, tax, shipping and total for one set of line items."""

    subtotal: float
    tax: float
    shipping: float
    total: float

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0

    @property
    def amount_to_free_shipping(self) -> float:
        """How much more the customer must add to ship free (0 once reached)."""
        if self.free_shipping:
            return 0.0
        return max(FREE_SHIPPING_THRESHOLD - self.subtotal, 0.0)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def compute_totals(items: Iterable[Any], subtotal_override: Optional[float] = None) -> CheckoutTotals:
    """
    Derive subtotal, tax, shipping and total.

    ``items`` is any iterable of objects with ``unit_price`` and ``quantity``
    (cart line items). Callers that already hold a subtotal can pass it as
    ``subtotal_override``; the items are then not summed.

    No rounding is applied; the order record stores these values verbatim.
    """
    if subtotal_override is not None:
        subtotal = subtotal_override
    else:
        subtotal = sum(item.unit_price * item.quantity for item in items)

    tax = subtotal * TAX_RATE
    shipping = 0 if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    total = subtotal + tax + shipping

    return CheckoutTotals(subtotal=subtotal, tax=tax, shipping=shipping, total=total)


def clean_checkout_form(form: Mapping[str, Any]) -> Dict[str, str]:
    """Strip and sanitize the address fields; unknown keys are dropped."""
    cleaned = {}
    for name in ADDRESS_FIELDS:
        value = form.get(name) or ""
        cleaned[name] = bleach.clean(str(value).strip(), tags=[], strip=True)
    return cleaned


def validate_checkout_form(form: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate a checkout address form.

    Returns:
        Field-keyed error map, one message per offending field. Empty when
        the form is valid.
    """
    errors: Dict[str, str] = {}

    for name, message in REQUIRED_FIELDS.items():
        if not str(form.get(name) or "").strip():
            errors[name] = message

    email = str(form.get("email") or "").strip()
    if email and not EMAIL_PATTERN.search(email):
        errors["email"] = "Email is invalid"

    phone = str(form.get("phone") or "").strip()
    if phone and not PHONE_PATTERN.match(phone):
        errors["phone"] = "Phone must be 10 digits"

    pincode = str(form.get("pincode") or "").strip()
    if pincode and not PINCODE_PATTERN.match(pincode):
        errors["pincode"] = "Pincode must be 6 digits"

    return errors
