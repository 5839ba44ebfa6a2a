# kioskscan/core/validation.py
"""
Format validators for wallet addresses and object ids.
"""
from __future__ import annotations

import re
from typing import Any

from kioskscan.core.errors import ValidationError

# Non-normalized addresses (leading zeros stripped) are accepted.
ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{1,64}$")
OBJECT_ID_PATTERN = re.compile(r"^0x[a-fA-F0-9]{64}$")


def is_valid_address(value: Any) -> bool:
    return isinstance(value, str) and bool(ADDRESS_PATTERN.match(value))


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def require_address(value: Any, field: str = "address") -> str:
    """Return ``value`` unchanged or raise ``ValidationError``."""
    if not is_valid_address(value):
        raise ValidationError("Invalid wallet address format", field)
    return value


def require_object_id(value: Any, field: str = "object_id") -> str:
    if not is_valid_object_id(value):
        raise ValidationError("Invalid object id format", field)
    return value
