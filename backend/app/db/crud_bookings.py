# app/db/crud_bookings.py
"""
Booking lifecycle.

A confirmed booking owns one ledger row per day of its range (reason
"booking"). After every write the booking's rows are reconciled with its
current range and status inside the same transaction, and a unique-key
collision on (car_id, date) while doing so rejects the whole write as a
conflict.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.dates import date_range, to_utc_date
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db import crud_availability
from app.db.models import BOOKING_STATUSES, Booking, Car, UnavailableDate

logger = logging.getLogger("uvicorn.error")

CONFLICT_MESSAGE = (
    "One or more dates in this range are already booked or unavailable "
    "for this car. Please choose different dates."
)

UPDATABLE_FIELDS = ("customer_name", "contact", "start_date", "end_date", "total_price", "status")


def _check_status(status: str) -> str:
    if status not in BOOKING_STATUSES:
        raise ValidationError(f"Invalid status: {status}. Use pending or confirmed.")
    return status


async def get_booking(db: AsyncSession, booking_id: int) -> Optional[Booking]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.car))
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(stmt)
    return res.scalar_one_or_none()


async def list_bookings(db: AsyncSession) -> List[Booking]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.car))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def sync_booking_dates(db: AsyncSession, booking: Booking) -> None:
    """
    Make the booking's ledger rows match its range and status.

    Confirmed bookings get a row for every day of their range; anything else
    owns no rows. Only flushes, the caller commits.
    """
    res = await db.execute(
        select(UnavailableDate).where(UnavailableDate.booking_id == booking.id)
    )
    owned = {row.date: row for row in res.scalars().all()}

    wanted = set()
    if booking.status == "confirmed" and booking.car_id is not None:
        wanted = set(date_range(booking.start_date, booking.end_date))

    for day, row in owned.items():
        if day not in wanted:
            await db.delete(row)
    # removals go out before the inserts
    await db.flush()

    for day in sorted(wanted - owned.keys()):
        db.add(
            UnavailableDate(
                car_id=booking.car_id,
                date=day,
                reason="booking",
                booking_id=booking.id,
            )
        )
    await db.flush()


async def _commit_with_ledger(db: AsyncSession, booking: Booking) -> None:
    # rollback expires the booking, so grab what the log line needs first
    car_id, start, end = booking.car_id, booking.start_date, booking.end_date
    try:
        await db.flush()
        await sync_booking_dates(db, booking)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("ledger collision for car %s between %s and %s", car_id, start, end)
        raise ConflictError(CONFLICT_MESSAGE)


async def create_booking(
    db: AsyncSession,
    *,
    car_id: Optional[int],
    customer_name: Optional[str],
    start_date: Any,
    end_date: Any,
    contact: Optional[str] = None,
    total_price: Optional[float] = None,
    status: Optional[str] = None,
) -> Booking:
    if car_id is None or not customer_name or start_date is None or end_date is None:
        raise ValidationError("car_id, customer_name, start_date, end_date required")

    start = to_utc_date(start_date)
    end = to_utc_date(end_date)
    if end < start:
        raise ValidationError("End date must be on or after start date.")
    status = _check_status(status or "pending")

    car = await db.get(Car, car_id)
    if car is None:
        raise NotFoundError("Car not found")

    if not await crud_availability.check_conflict(db, car_id, start, end):
        logger.info("booking rejected, car %s unavailable %s..%s", car_id, start, end)
        raise ConflictError(CONFLICT_MESSAGE)

    booking = Booking(
        car_id=car_id,
        customer_name=customer_name,
        contact=contact or "",
        start_date=start,
        end_date=end,
        total_price=total_price,
        status=status,
        source="manual",
    )
    db.add(booking)
    await _commit_with_ledger(db, booking)
    return await get_booking(db, booking.id)


async def update_booking(db: AsyncSession, booking_id: int, data: Dict[str, Any]) -> Booking:
    """
    Apply a partial update. Fields that are absent or None are left alone.

    The conflict check only runs when the date range actually changes, and
    the ledger is only reconciled when the range or the status changes.
    """
    booking = await get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    changes = {k: data[k] for k in UPDATABLE_FIELDS if data.get(k) is not None}

    start = to_utc_date(changes["start_date"]) if "start_date" in changes else booking.start_date
    end = to_utc_date(changes["end_date"]) if "end_date" in changes else booking.end_date
    if end < start:
        raise ValidationError("End date must be on or after start date.")
    if "status" in changes:
        _check_status(changes["status"])

    range_changed = (start, end) != (booking.start_date, booking.end_date)
    if range_changed and booking.car_id is not None:
        available = await crud_availability.check_conflict(
            db, booking.car_id, start, end, exclude_booking_id=booking.id
        )
        if not available:
            logger.info("booking %s update rejected, %s..%s unavailable", booking.id, start, end)
            raise ConflictError(CONFLICT_MESSAGE)

    status_changed = changes.get("status", booking.status) != booking.status

    changes["start_date"] = start
    changes["end_date"] = end
    for k, v in changes.items():
        setattr(booking, k, v)
    db.add(booking)
    if range_changed or status_changed:
        await _commit_with_ledger(db, booking)
    else:
        # ledger rows untouched for edits that keep range and status
        await db.commit()
    return await get_booking(db, booking.id)


async def delete_booking(db: AsyncSession, booking_id: int) -> None:
    """Delete a booking together with the ledger rows it owns."""
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    await db.execute(delete(UnavailableDate).where(UnavailableDate.booking_id == booking_id))
    await db.delete(booking)
    await db.commit()
