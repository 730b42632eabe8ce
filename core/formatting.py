"""Rounding and serialisation helpers for FlowCast results."""

from __future__ import annotations

import dataclasses
import math
from datetime import date
from typing import Any

import numpy as np

__all__ = ["round_half_up", "round_confidence", "format_currency", "to_serializable"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going towards positive infinity.

    ``round_half_up(2.5) == 3`` and ``round_half_up(-2.5) == -2``, unlike the
    built-in banker's rounding.
    """

    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def round_confidence(value: float) -> float:
    return round_half_up(value * 100) / 100


def format_currency(amount: float, symbol: str = "₹") -> str:
    return f"{symbol}{round_half_up(amount):,}"


def to_serializable(value: Any) -> Any:
    """Convert result objects into JSON-ready builtins.

    Dataclasses become dicts, dates become ISO-8601 strings, and numpy scalars
    become Python numbers.
    """

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: to_serializable(getattr(value, item.name))
            for item in dataclasses.fields(value)
        }
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, dict):
        return {str(key): to_serializable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    return value
