from __future__ import annotations

import re
from datetime import time
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm

MAC_ADDRESS_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Email").lower()
    if not EMAIL_RE.match(value):
        raise ValidationError("Email address is not valid")
    return value


def require_hhmm(value: str, field_name: str) -> time:
    value = require_non_empty(value, field_name)
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"{field_name} must use HH:mm format") from None


def normalize_credential(value: Optional[str]) -> Optional[str]:
    """Trim and upper-case an RFID UID or MAC address; blank means unset."""

    if value is None:
        return None
    value = str(value).strip().upper()
    return value or None


def normalize_mac_address(value: Optional[str]) -> Optional[str]:
    value = normalize_credential(value)
    if value is None:
        return None
    if not MAC_ADDRESS_RE.match(value):
        raise ValidationError("Please enter a valid MAC address format (e.g., 00:1A:2B:3C:4D:5E)")
    return value
