# backend/app/schemas/car.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CarOut(BaseModel):
    id: int
    name: str
    description: str
    price_per_day: float
    image_urls: List[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class CarSummary(BaseModel):
    """Car fields denormalized into booking responses."""

    id: int
    name: str
    price_per_day: float

    model_config = {"from_attributes": True}


class CarCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    price_per_day: float = Field(ge=0)


class CarUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price_per_day: Optional[float] = Field(default=None, ge=0)


class CarImageDelete(BaseModel):
    url: str = Field(min_length=1)
