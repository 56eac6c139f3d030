# app/db/crud_availability.py
"""
The unavailable-dates ledger: one row per blocked day per car.

A car is free for a range when none of the days in it has a ledger row. Admin
blackout dates and confirmed-booking days look the same to that check.
"""
import logging
from datetime import date
from typing import Any, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import date_range, month_bounds, to_utc_date
from app.core.errors import ValidationError
from app.db.models import UnavailableDate

logger = logging.getLogger("uvicorn.error")


def _normalize_days(dates: Iterable[Any]) -> List[date]:
    return sorted({to_utc_date(d) for d in dates})


async def list_unavailable(
    db: AsyncSession,
    car_id: int,
    year: int,
    month: int,
) -> List[str]:
    """
    Blocked days of one calendar month, as sorted YYYY-MM-DD strings.
    """
    first, last = month_bounds(year, month)
    stmt = (
        select(UnavailableDate.date)
        .where(UnavailableDate.car_id == car_id)
        .where(UnavailableDate.date >= first)
        .where(UnavailableDate.date <= last)
        .order_by(UnavailableDate.date.asc())
    )
    res = await db.execute(stmt)
    return [d.isoformat() for d in res.scalars().all()]


async def check_conflict(
    db: AsyncSession,
    car_id: int,
    start_date: Any,
    end_date: Any,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    """
    True when the car is free for every day of [start_date, end_date].

    An inverted range is reported as free. Rows owned by exclude_booking_id
    are ignored so a booking never conflicts with itself while being edited.
    """
    if car_id is None or start_date is None or end_date is None:
        raise ValidationError("car_id, start_date, end_date required")

    days = date_range(start_date, end_date)
    if not days:
        return True

    stmt = (
        select(UnavailableDate.id)
        .where(UnavailableDate.car_id == car_id)
        .where(UnavailableDate.date.in_(days))
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(
            (UnavailableDate.booking_id.is_(None))
            | (UnavailableDate.booking_id != exclude_booking_id)
        )
    res = await db.execute(stmt.limit(1))
    return res.scalar_one_or_none() is None


async def count_in_range(db: AsyncSession, car_id: int, first: date, last: date) -> int:
    stmt = (
        select(func.count(UnavailableDate.id))
        .where(UnavailableDate.car_id == car_id)
        .where(UnavailableDate.date >= first)
        .where(UnavailableDate.date <= last)
    )
    return (await db.execute(stmt)).scalar_one()


async def mark_unavailable(
    db: AsyncSession,
    car_id: int,
    dates: Iterable[Any],
    reason: str = "manual",
) -> int:
    """
    Block the given days for a car. Days that are already blocked are left
    as they are, so marking twice is a no-op.

    Returns the number of blocked days between the earliest and latest of the
    requested days after the insert, not the number of new rows.
    """
    if car_id is None:
        raise ValidationError("car_id and dates array required")
    days = _normalize_days(dates)
    if not days:
        raise ValidationError("car_id and dates array required")

    res = await db.execute(
        select(UnavailableDate.date)
        .where(UnavailableDate.car_id == car_id)
        .where(UnavailableDate.date.in_(days))
    )
    already = set(res.scalars().all())
    missing = [d for d in days if d not in already]

    if missing:
        db.add_all(
            UnavailableDate(car_id=car_id, date=d, reason=reason, booking_id=None)
            for d in missing
        )
        try:
            await db.commit()
        except IntegrityError:
            # another writer blocked some of these days in the meantime
            await db.rollback()
            await _insert_one_by_one(db, car_id, missing, reason)

    return await count_in_range(db, car_id, days[0], days[-1])


async def _insert_one_by_one(
    db: AsyncSession,
    car_id: int,
    days: List[date],
    reason: str,
) -> None:
    for d in days:
        db.add(UnavailableDate(car_id=car_id, date=d, reason=reason, booking_id=None))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.debug("car %s already blocked on %s", car_id, d)


async def unmark_unavailable(
    db: AsyncSession,
    car_id: int,
    dates: Iterable[Any],
    *,
    protect_booking_dates: bool = False,
) -> int:
    """
    Unblock the given days for a car and return how many rows went away.

    Rows owned by bookings are removed too unless protect_booking_dates is set.
    """
    if car_id is None:
        raise ValidationError("car_id and dates array required")
    days = _normalize_days(dates)
    if not days:
        raise ValidationError("car_id and dates array required")

    stmt = (
        delete(UnavailableDate)
        .where(UnavailableDate.car_id == car_id)
        .where(UnavailableDate.date.in_(days))
    )
    if protect_booking_dates:
        stmt = stmt.where(UnavailableDate.booking_id.is_(None))
    res = await db.execute(stmt)
    await db.commit()
    return int(res.rowcount or 0)


async def list_blocked_car_ids(db: AsyncSession, day: date) -> List[int]:
    """Cars with a ledger row on the given day."""
    res = await db.execute(
        select(UnavailableDate.car_id).where(UnavailableDate.date == day).distinct()
    )
    return list(res.scalars().all())
