# app/db/crud_dashboard.py
"""
Read-only aggregates for the admin dashboard. Month buckets are UTC calendar
months; every function takes an optional ``today`` so the window is testable.
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.dates import month_bounds, month_label, shift_month, utc_today
from app.db import crud_availability
from app.db.models import Booking, Car

ACTIVE_STATUSES = ("pending", "confirmed")


def _created_between(year: int, month: int) -> Tuple[datetime, datetime]:
    next_year, next_month = shift_month(year, month, 1)
    return datetime(year, month, 1), datetime(next_year, next_month, 1)


async def _count_created_in_month(
    db: AsyncSession,
    year: int,
    month: int,
    status: Optional[str] = None,
) -> int:
    lo, hi = _created_between(year, month)
    stmt = select(func.count(Booking.id)).where(Booking.created_at >= lo, Booking.created_at < hi)
    if status:
        stmt = stmt.where(Booking.status == status)
    return (await db.execute(stmt)).scalar_one()


async def _confirmed_revenue_in_month(db: AsyncSession, year: int, month: int) -> float:
    first, last = month_bounds(year, month)
    stmt = select(func.coalesce(func.sum(Booking.total_price), 0)).where(
        Booking.status == "confirmed",
        Booking.start_date >= first,
        Booking.start_date <= last,
    )
    return float((await db.execute(stmt)).scalar_one() or 0)


async def dashboard_stats(db: AsyncSession, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or utc_today()
    in_7_days = today + timedelta(days=7)
    last_year, last_month = shift_month(today.year, today.month, -1)

    total_cars = (await db.execute(select(func.count(Car.id)))).scalar_one()
    total_bookings = (await db.execute(select(func.count(Booking.id)))).scalar_one()

    bookings_this_month = await _count_created_in_month(db, today.year, today.month)
    bookings_last_month = await _count_created_in_month(db, last_year, last_month)
    confirmed_this_month = await _count_created_in_month(db, today.year, today.month, "confirmed")
    pending_this_month = await _count_created_in_month(db, today.year, today.month, "pending")

    unavailable_today = len(await crud_availability.list_blocked_car_ids(db, today))

    upcoming_pickups = (
        await db.execute(
            select(func.count(Booking.id)).where(
                Booking.start_date >= today,
                Booking.start_date <= in_7_days,
                Booking.status.in_(ACTIVE_STATUSES),
            )
        )
    ).scalar_one()
    upcoming_returns = (
        await db.execute(
            select(func.count(Booking.id)).where(
                Booking.end_date >= today,
                Booking.end_date <= in_7_days,
                Booking.status.in_(ACTIVE_STATUSES),
            )
        )
    ).scalar_one()

    revenue_this_month = await _confirmed_revenue_in_month(db, today.year, today.month)

    res = await db.execute(
        select(Booking.start_date, Booking.end_date).where(Booking.status == "confirmed")
    )
    durations = [(end - start).days for start, end in res.all()]
    avg_duration = sum(durations) / len(durations) if durations else 0.0

    growth_percent = 0.0
    if bookings_last_month > 0:
        growth_percent = round(
            (bookings_this_month - bookings_last_month) / bookings_last_month * 100, 1
        )
    elif bookings_this_month > 0:
        growth_percent = 100.0

    return {
        "total_cars": total_cars,
        "total_bookings": total_bookings,
        "bookings_this_month": bookings_this_month,
        "confirmed_this_month": confirmed_this_month,
        "pending_this_month": pending_this_month,
        "growth_percent": growth_percent,
        "available_today": max(0, total_cars - unavailable_today),
        "unavailable_today": unavailable_today,
        "upcoming_pickups": upcoming_pickups,
        "upcoming_returns": upcoming_returns,
        "revenue_this_month": revenue_this_month,
        "avg_booking_duration_days": round(avg_duration, 1),
    }


def _last_months(today: date, count: int) -> List[Tuple[int, int]]:
    return [shift_month(today.year, today.month, -i) for i in range(count - 1, -1, -1)]


async def monthly_booking_counts(
    db: AsyncSession,
    months: int = 12,
    today: Optional[date] = None,
) -> Dict[str, list]:
    labels, data = [], []
    for year, month in _last_months(today or utc_today(), months):
        labels.append(month_label(year, month))
        data.append(await _count_created_in_month(db, year, month))
    return {"labels": labels, "data": data}


async def monthly_bookings_by_status(
    db: AsyncSession,
    months: int = 12,
    today: Optional[date] = None,
) -> Dict[str, list]:
    labels, pending, confirmed = [], [], []
    for year, month in _last_months(today or utc_today(), months):
        labels.append(month_label(year, month))
        pending.append(await _count_created_in_month(db, year, month, "pending"))
        confirmed.append(await _count_created_in_month(db, year, month, "confirmed"))
    return {"labels": labels, "pending": pending, "confirmed": confirmed}


async def monthly_revenue(
    db: AsyncSession,
    months: int = 12,
    today: Optional[date] = None,
) -> Dict[str, list]:
    labels, data = [], []
    for year, month in _last_months(today or utc_today(), months):
        labels.append(month_label(year, month))
        data.append(await _confirmed_revenue_in_month(db, year, month))
    return {"labels": labels, "data": data}


async def most_rented_cars(db: AsyncSession, limit: int = 10) -> Dict[str, list]:
    count_col = func.count(Booking.id).label("rentals")
    stmt = (
        select(Car.name, count_col)
        .join(Booking, Booking.car_id == Car.id)
        .group_by(Car.id, Car.name)
        .order_by(count_col.desc(), Car.name.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()
    return {"labels": [r.name for r in rows], "data": [int(r.rentals) for r in rows]}


async def upcoming_bookings(
    db: AsyncSession,
    today: Optional[date] = None,
    days: int = 14,
    limit: int = 20,
) -> List[Booking]:
    today = today or utc_today()
    stmt = (
        select(Booking)
        .options(selectinload(Booking.car))
        .where(
            Booking.start_date >= today,
            Booking.start_date <= today + timedelta(days=days),
            Booking.status.in_(ACTIVE_STATUSES),
        )
        .order_by(Booking.start_date.asc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def upcoming_returns(
    db: AsyncSession,
    today: Optional[date] = None,
    days: int = 14,
    limit: int = 20,
) -> List[Booking]:
    today = today or utc_today()
    stmt = (
        select(Booking)
        .options(selectinload(Booking.car))
        .where(
            Booking.end_date >= today,
            Booking.end_date <= today + timedelta(days=days),
            Booking.status.in_(ACTIVE_STATUSES),
        )
        .order_by(Booking.end_date.asc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def recent_bookings(db: AsyncSession, limit: int = 10) -> List[Booking]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.car))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def list_bookings_for_report(
    db: AsyncSession,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status: Optional[str] = None,
    car_id: Optional[int] = None,
) -> List[Booking]:
    """
    Bookings overlapping [date_from, date_to], earliest start first.
    Either bound may be open.
    """
    stmt = select(Booking).options(selectinload(Booking.car))
    if status and status != "all":
        stmt = stmt.where(Booking.status == status)
    if car_id:
        stmt = stmt.where(Booking.car_id == car_id)
    if date_to is not None:
        stmt = stmt.where(Booking.start_date <= date_to)
    if date_from is not None:
        stmt = stmt.where(Booking.end_date >= date_from)
    stmt = stmt.order_by(Booking.start_date.asc(), Booking.id.asc())
    return list((await db.execute(stmt)).scalars().all())
