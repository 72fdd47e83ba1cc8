"""Input validation and normalization for profile fields."""

import re
from typing import Optional

# Same shape as the email matcher used by mobile platforms.
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)

PHONE_PATTERN = re.compile(r"[0-9+\-\s().]*")

_PHONE_STRIP = re.compile(r"[^0-9+]")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    """Empty is valid; otherwise digits, `+`, `-`, spaces, parentheses and dots."""
    return PHONE_PATTERN.fullmatch(phone) is not None


def normalize_phone(phone: str) -> Optional[str]:
    """Keep only digits and `+`. Nothing left means "no phone"."""
    if not phone:
        return None
    return _PHONE_STRIP.sub("", phone) or None
