# app/core/dates.py
"""
Calendar-day helpers.

Every day the ledger stores is a UTC calendar day. Anything carrying a time of
day (datetime objects, ISO timestamps) is converted to UTC first and then
truncated, so local-timezone day boundaries never leak into conflict checks.
"""
import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Tuple

from app.core.errors import ValidationError


def to_utc_date(value: Any) -> date:
    """
    Normalise a date, datetime or ISO string to a UTC calendar day.

    Naive datetimes are taken to be UTC already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError("Invalid date: empty value")
        if len(text) == 10:
            try:
                return date.fromisoformat(text)
            except ValueError:
                raise ValidationError(f"Invalid date: {value}. Use YYYY-MM-DD.")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_utc_date(datetime.fromisoformat(text))
        except ValueError:
            raise ValidationError(f"Invalid date: {value}. Use YYYY-MM-DD.")
    raise ValidationError(f"Invalid date: {value!r}")


def date_range(start: Any, end: Any) -> List[date]:
    """
    Every UTC day from start to end, both inclusive.

    Returns an empty list when end falls before start; callers that need to
    reject inverted ranges must check before calling.
    """
    first = to_utc_date(start)
    last = to_utc_date(end)
    span = (last - first).days
    return [first + timedelta(days=i) for i in range(span + 1)]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()
