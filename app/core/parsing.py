"""Defensive parsing helpers for values coming out of the store."""

import math
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

# Leading numeric prefix, e.g. "12.50", "-3", ".5", "1e3", "7 EUR"
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_price(value: Any) -> float:
    """Parse a stored price into a float, falling back to 0.0.

    Prices are ingested as free-form text, so anything that does not start
    with a number (None, "", "abc", "$5") counts as 0. Non-finite values
    are treated the same way.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return the datetime in UTC, treating naive values as UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
