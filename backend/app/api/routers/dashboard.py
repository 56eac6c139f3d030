from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin
from app.db import crud_dashboard
from app.db.session import get_db
from app.schemas.booking import BookingOut

# every dashboard endpoint is admin-only
router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("/stats")
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.dashboard_stats(db)


@router.get("/charts/monthly-bookings")
async def monthly_bookings(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.monthly_booking_counts(db, months=12)


@router.get("/charts/booking-growth")
async def booking_growth(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.monthly_booking_counts(db, months=6)


@router.get("/charts/most-rented-cars")
async def most_rented_cars(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.most_rented_cars(db)


@router.get("/charts/monthly-bookings-by-status")
async def monthly_bookings_by_status(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.monthly_bookings_by_status(db, months=12)


@router.get("/charts/monthly-revenue")
async def monthly_revenue(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.monthly_revenue(db, months=12)


@router.get("/upcoming-bookings", response_model=list[BookingOut])
async def upcoming_bookings(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.upcoming_bookings(db)


@router.get("/upcoming-returns", response_model=list[BookingOut])
async def upcoming_returns(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.upcoming_returns(db)


@router.get("/recent-bookings", response_model=list[BookingOut])
async def recent_bookings(db: AsyncSession = Depends(get_db)):
    return await crud_dashboard.recent_bookings(db)
