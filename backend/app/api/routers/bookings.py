from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin
from app.core.errors import NotFoundError
from app.db import crud_bookings
from app.db.session import get_db
from app.schemas.booking import BookingCreate, BookingOut, BookingUpdate

router = APIRouter()


@router.get("", response_model=list[BookingOut])
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    return await crud_bookings.list_bookings(db)


@router.get("/{booking_id}", response_model=BookingOut)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    booking = await crud_bookings.get_booking(db, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    return await crud_bookings.create_booking(
        db,
        car_id=body.car_id,
        customer_name=body.customer_name,
        contact=body.contact,
        start_date=body.start_date,
        end_date=body.end_date,
        total_price=body.total_price,
        status=body.status,
    )


@router.put("/{booking_id}", response_model=BookingOut)
async def update_booking(
    booking_id: int,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    return await crud_bookings.update_booking(db, booking_id, body.model_dump())


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    await crud_bookings.delete_booking(db, booking_id)
    return {"success": True}
