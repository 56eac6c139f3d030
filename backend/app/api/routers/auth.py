# app/api/routers/auth.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError

from app.api.dependencies import get_current_admin
from app.core.config import settings
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from app.db import crud_admins
from app.db.session import get_db
from app.schemas.admin import AdminCreate, AdminLogin, AdminOut
from app.schemas.auth import RefreshRequest, Token

logger = logging.getLogger("uvicorn.error")

router = APIRouter()


async def _issue_tokens(db: AsyncSession, admin) -> Dict[str, Any]:
    """
    Return a simple dict matching the Token pydantic model:
    { access_token, refresh_token, token_type, admin }
    """
    data = {"admin_id": admin.id}
    access = create_access_token(data)
    refresh = create_refresh_token(data)
    await crud_admins.save_refresh_token(db, admin.id, refresh)
    return {
        "access_token": access,
        "refresh_token": refresh,
        "token_type": "bearer",
        "admin": AdminOut.model_validate(admin),
    }


@router.post("/login", response_model=Token)
async def login(body: AdminLogin, db: AsyncSession = Depends(get_db)):
    if not body.username or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password required",
        )

    admin = await crud_admins.get_admin_by_username(db, body.username)
    if not admin or not verify_password(body.password, admin.hashed_password):
        logger.info("failed admin login for %r", crud_admins.normalize_username(body.username))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return await _issue_tokens(db, admin)


@router.post("/refresh", response_model=Token)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    if not body.refresh_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing token")

    try:
        payload = decode_refresh_token(body.refresh_token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    if not await crud_admins.is_refresh_token_active(db, body.refresh_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token revoked")

    admin = await crud_admins.get_admin(db, int(payload.get("admin_id") or 0))
    if not admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")

    return await _issue_tokens(db, admin)


@router.post("/logout")
async def logout(
    body: RefreshRequest | None = None,
    db: AsyncSession = Depends(get_db),
):
    # Access tokens simply expire; only the refresh token is revoked.
    if body and body.refresh_token:
        await crud_admins.revoke_refresh_token(db, body.refresh_token)
    return {"success": True}


@router.get("/me")
async def me(current_admin=Depends(get_current_admin)):
    return {"admin": True, "data": AdminOut.model_validate(current_admin)}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: AdminCreate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    """
    Add another admin. Only existing admins can do this.
    """
    username = crud_admins.normalize_username(body.username)
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is required")
    if not body.password or len(body.password) < settings.ADMIN_PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.ADMIN_PASSWORD_MIN_LENGTH} characters",
        )
    if await crud_admins.get_admin_by_username(db, username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    admin = await crud_admins.create_admin(db, username, body.password)
    logger.info("admin %s added by %s", admin.username, current_admin.username)
    return {"success": True, "message": "Admin created", "data": AdminOut.model_validate(admin)}
