# backend/app/schemas/admin.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminOut(BaseModel):
    id: int
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
