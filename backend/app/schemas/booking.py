# backend/app/schemas/booking.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.car import CarSummary


class BookingCreate(BaseModel):
    # presence is checked by crud_bookings so the error message is uniform
    car_id: Optional[int] = None
    customer_name: Optional[str] = None
    contact: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    total_price: Optional[float] = None
    status: Optional[str] = None


class BookingUpdate(BaseModel):
    customer_name: Optional[str] = None
    contact: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    total_price: Optional[float] = None
    status: Optional[str] = None


class BookingOut(BaseModel):
    id: int
    car_id: Optional[int] = None
    # None when the car has since been deleted
    car: Optional[CarSummary] = None
    customer_name: str
    contact: str
    start_date: date
    end_date: date
    total_price: Optional[float] = None
    status: str
    source: str
    created_at: datetime

    # Pydantic v2 style – replaces orm_mode=True
    model_config = {"from_attributes": True}
