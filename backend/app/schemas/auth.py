# app/schemas/auth.py
from typing import Optional
from pydantic import BaseModel

from app.schemas.admin import AdminOut


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    admin: Optional[AdminOut] = None

    model_config = {"from_attributes": True}


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None
