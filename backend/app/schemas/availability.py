# backend/app/schemas/availability.py
from typing import List, Optional

from pydantic import BaseModel


class AvailabilityCheck(BaseModel):
    available: bool


class AvailabilityMonth(BaseModel):
    dates: List[str]


class DatesBody(BaseModel):
    car_id: Optional[int] = None
    dates: Optional[List[str]] = None
