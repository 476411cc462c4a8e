"""Validation helpers for configuration payloads."""

from __future__ import annotations

from typing import Any


def ensure_mapping(value: Any, *, name: str) -> dict[str, Any]:
    """Return *value* as ``dict`` or raise a descriptive ``TypeError``."""

    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


def ensure_positive(value: Any, *, name: str, allow_none: bool = False) -> float | None:
    """Return *value* as a positive ``float``; ``None`` passes when allowed."""

    if value is None:
        if allow_none:
            return None
        raise ValueError(f"{name} is required")
    number = float(value)
    if not number > 0.0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return number


def optional_count(value: Any, *, name: str, minimum: int = 1) -> int | None:
    if value is None:
        return None
    count = int(value)
    if count < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value!r}")
    return count
