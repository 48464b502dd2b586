"""
Client-side checks run before anything is sent to the backend. Each returns
an error string for the user, or None when the input is acceptable.
"""

import mimetypes
import os
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple

PROOF_TYPES = ("image/jpeg", "image/png")
PROOF_MAX_BYTES = 2 * 1024 * 1024

IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
IMAGE_MAX_BYTES = 5 * 1024 * 1024

USER_ROLES = ("user", "admin")


def clean_credentials(email: str, password: str) -> Tuple[str, str]:
    """Emails lose surrounding whitespace; passwords are sent exactly as typed."""
    return email.strip(), password


def validate_login(email: str, password: str) -> Optional[str]:
    if not email or not password:
        return "Email and password cannot be empty!"
    return None


def validate_registration(
    name: str, email: str, password: str, confirmation: str
) -> Optional[str]:
    if not name or not email or not password:
        return "Make sure all inputs are filled."
    if password != confirmation:
        return "Password confirmation does not match."
    if len(password) < 6:
        return "Password must be at least 6 characters."
    return None


def _guess_type(path: str) -> Optional[str]:
    return mimetypes.guess_type(path)[0]


def validate_payment_proof(path: str) -> Optional[str]:
    if not path:
        return "Choose a file first."
    if not os.path.isfile(path):
        return f"File not found: {path}"
    if _guess_type(path) not in PROOF_TYPES:
        return "The file must be a JPEG, PNG or JPG image."
    if os.path.getsize(path) > PROOF_MAX_BYTES:
        return "The file may be at most 2MB."
    return None


def validate_image_files(paths: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split paths into (usable, errors); one error line per rejected file."""
    valid: List[str] = []
    errors: List[str] = []
    for path in paths:
        name = os.path.basename(path)
        if not os.path.isfile(path):
            errors.append(f"{name}: not found")
        elif _guess_type(path) not in IMAGE_TYPES:
            errors.append(f"{name}: unsupported format")
        elif os.path.getsize(path) > IMAGE_MAX_BYTES:
            errors.append(f"{name}: larger than 5MB")
        else:
            valid.append(path)
    return valid, errors


def split_paths(raw: str) -> List[str]:
    """Paths typed into one input, separated by commas or newlines."""
    parts = raw.replace("\n", ",").split(",")
    return [os.path.expanduser(p.strip()) for p in parts if p.strip()]


def parse_perfume_form(
    name: str, brand: str, description: str, price: str, stock: str
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Return (fields, None) ready for the admin perfume endpoints, or
    (None, error).
    """
    name, price, stock = name.strip(), price.strip(), stock.strip()
    if not name or not price or not stock:
        return None, "Name, price and stock are required."
    try:
        price_val = Decimal(price)
    except InvalidOperation:
        return None, "Price must be a number."
    if not price_val.is_finite():
        return None, "Price must be a number."
    if price_val < 0:
        return None, "Price cannot be negative."
    if not stock.isdigit():
        return None, "Stock must be a whole number of zero or more."
    return {
        "name": name,
        "brand": brand.strip() or None,
        "description": description.strip(),
        "price": str(price_val),
        "stock": int(stock),
    }, None


def validate_user_form(name: str, email: str, role: str) -> Optional[str]:
    if not name.strip() or not email.strip():
        return "Name and email are required."
    if "@" not in email:
        return "Enter a valid email address."
    if role not in USER_ROLES:
        return "Role must be user or admin."
    return None
