# app/api/routers/availability.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin
from app.core.config import settings
from app.core.errors import ValidationError
from app.db import crud_availability
from app.db.session import get_db
from app.schemas.availability import AvailabilityCheck, AvailabilityMonth, DatesBody

router = APIRouter()


@router.get("/check", response_model=AvailabilityCheck)
async def check_availability(
    db: AsyncSession = Depends(get_db),
    car_id: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    exclude_booking_id: Optional[int] = None,
    current_start_date: Optional[str] = None,
    current_end_date: Optional[str] = None,
):
    """
    Is this car free for the date range? Used by the booking form.

    When editing a booking the form also sends the booking's stored range;
    an unchanged range is reported free without touching the ledger.
    """
    if car_id is None or not start_date or not end_date:
        raise ValidationError("car_id, start_date, end_date required")

    if (
        exclude_booking_id is not None
        and current_start_date
        and current_end_date
        and (current_start_date, current_end_date) == (start_date, end_date)
    ):
        return {"available": True}

    available = await crud_availability.check_conflict(
        db,
        car_id,
        start_date,
        end_date,
        exclude_booking_id=exclude_booking_id,
    )
    return {"available": available}


@router.get("", response_model=AvailabilityMonth)
async def list_unavailable_dates(
    db: AsyncSession = Depends(get_db),
    car_id: Optional[int] = None,
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    if car_id is None or year is None or month is None:
        raise ValidationError("car_id, year, month required")
    dates = await crud_availability.list_unavailable(db, car_id, year, month)
    return {"dates": dates}


@router.post("")
async def mark_unavailable(
    body: DatesBody,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    added = await crud_availability.mark_unavailable(db, body.car_id, body.dates or [])
    return {"added": added}


@router.delete("")
async def unmark_unavailable(
    body: DatesBody,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    removed = await crud_availability.unmark_unavailable(
        db,
        body.car_id,
        body.dates or [],
        protect_booking_dates=settings.PROTECT_BOOKING_DATES,
    )
    return {"removed": removed}
