from __future__ import annotations

import re
from typing import Any


# -----------------------------------------------------------------------------
def _extract_int_from_str(value: str) -> int | None:
    stripped = value.strip()
    if not stripped:
        return None
    if stripped.lstrip("-").isdigit():
        return int(stripped)
    match = re.search(r"-?\d+", stripped)
    return int(match.group(0)) if match else None


# -----------------------------------------------------------------------------
def extract_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return _extract_int_from_str(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# -----------------------------------------------------------------------------
def coerce_int(value: Any, default: int) -> int:
    candidate = extract_int(value)
    return candidate if candidate is not None else default


# -----------------------------------------------------------------------------
def coerce_positive_int(value: Any, default: int) -> int:
    candidate = extract_int(value)
    if candidate is None or candidate <= 0:
        return default
    return candidate


# -----------------------------------------------------------------------------
def coerce_fraction(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        candidate = float(value)
    except (TypeError, ValueError):
        return default
    if candidate != candidate:
        return default
    return max(0.0, min(1.0, candidate))


# -----------------------------------------------------------------------------
def coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    return default


# -----------------------------------------------------------------------------
def coerce_str(value: Any, default: str) -> str:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or default
    if value is None:
        return default
    return str(value).strip() or default


# -----------------------------------------------------------------------------
def coerce_str_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


__all__ = [
    "coerce_bool",
    "coerce_fraction",
    "coerce_int",
    "coerce_positive_int",
    "coerce_str",
    "coerce_str_or_none",
    "extract_int",
]
