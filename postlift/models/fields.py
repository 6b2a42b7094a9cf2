"""Lenient parsers for business fields coming from upstream collaborators.

Nothing here raises for bad prices: an order we cannot price simply
contributes nothing to attribution.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_price(value: Any) -> float:
    """Parse a price string or number into a non-negative float (0 if invalid)."""
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float, Decimal)):
        amount = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            amount = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return 0.0

    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


def parse_timestamp(value: datetime | str) -> datetime:
    """
    Parse an ISO-8601 instant into a timezone-aware UTC datetime.

    Naive values are taken as UTC. Raises ValueError for unparseable strings;
    callers at the edges (API, CSV) turn that into a user-facing error.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalize_email(value: str | None) -> str | None:
    """Lowercase and trim an email; blank values become None."""
    if not value:
        return None
    email = str(value).strip().lower()
    return email or None


def parse_count(value: Any) -> int:
    """Parse an engagement counter, treating anything invalid as 0."""
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)
