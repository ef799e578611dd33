"\"\"\"Date parsing and recency helpers.\"\"\""

from __future__ import annotations

import math
from typing import Any

import pendulum


def parse_date(value: str | None, *, default: pendulum.DateTime | None = None) -> pendulum.DateTime | None:
    """Parse ISO timestamps and ``YYYY-MM`` strings; fall back to ``default``."""
    if not value:
        return default
    try:
        if len(value) == 7 and value[4] == "-":
            return pendulum.datetime(int(value[:4]), int(value[5:7]), 1)
        parsed = pendulum.parse(value)
    except (ValueError, TypeError):
        return default
    if not isinstance(parsed, pendulum.DateTime):
        return default
    return parsed


def resolve_as_of(value: Any, now_provider: Any) -> pendulum.DateTime:
    """Return the reference instant for recency calculations."""
    default_now = now_provider()
    if value is None:
        return default_now
    if isinstance(value, pendulum.DateTime):
        return value
    return parse_date(str(value), default=default_now) or default_now


def days_since(value: str | None, as_of: pendulum.DateTime) -> int | None:
    moment = parse_date(value)
    if moment is None:
        return None
    if moment > as_of:
        return 0
    return as_of.diff(moment).in_days()


def recency_weight(days: int | None, *, midpoint_days: float = 180.0, scale_days: float = 60.0) -> float | None:
    """Logistic decay: ~0.95 when fresh, 0.5 at the midpoint, ~0.05 a half-year later."""
    if days is None:
        return None
    exponent = min((days - midpoint_days) / scale_days, 60.0)
    return 1.0 / (1.0 + math.exp(exponent))
