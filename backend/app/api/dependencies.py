# app/api/dependencies.py
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthorizationError
from app.core.security import verify_access_token
from app.db import crud_admins
from app.db.models import Admin
from app.db.session import get_db

logger = logging.getLogger("uvicorn.error")
security = HTTPBearer(auto_error=False)


async def get_current_admin(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Admin:
    """
    Admin gate for every mutating endpoint.
    Extracts JWT from Authorization: Bearer <token> and loads the admin.
    """
    if credentials is None:
        raise AuthorizationError("Unauthorized")

    try:
        payload = verify_access_token(credentials.credentials)
    except JWTError:
        logger.exception("token decode error")
        raise AuthorizationError("Invalid token")

    try:
        admin_id = int(payload["admin_id"])
    except (TypeError, ValueError):
        raise AuthorizationError("Invalid token admin id")

    admin = await crud_admins.get_admin(db, admin_id)
    if not admin:
        raise AuthorizationError("Admin not found")
    return admin
