"""
Small coercion helpers for loosely-typed upstream metadata.
"""

from typing import Any


def int_or_none(v: Any, scale: int = 1) -> int | None:
    """Convert value to int or return None."""
    if v is None:
        return None
    try:
        return int(v) // scale
    except (ValueError, TypeError):
        return None


def float_or_none(v: Any, scale: float = 1.0) -> float | None:
    """Convert value to float or return None."""
    if v is None:
        return None
    try:
        return float(v) / scale
    except (ValueError, TypeError):
        return None


def str_or_none(v: Any) -> str | None:
    """Convert value to string or return None."""
    if v is None:
        return None
    result = str(v).strip()
    return result if result else None


def url_or_none(v: Any) -> str | None:
    """Validate and return URL or None."""
    if not v or not isinstance(v, str):
        return None
    v = v.strip()
    if v.startswith(("http://", "https://")):
        return v
    if v.startswith("//"):
        return f"https:{v}"
    return None
