# app/db/crud_admins.py

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Admin, AdminRefreshToken
from app.core.security import get_password_hash


def normalize_username(username: Optional[str]) -> str:
    return (username or "").strip().lower()


async def get_admin(db: AsyncSession, admin_id: int) -> Optional[Admin]:
    res = await db.execute(select(Admin).where(Admin.id == admin_id))
    return res.scalar_one_or_none()


async def get_admin_by_username(db: AsyncSession, username: str) -> Optional[Admin]:
    res = await db.execute(select(Admin).where(Admin.username == normalize_username(username)))
    return res.scalar_one_or_none()


async def create_admin(db: AsyncSession, username: str, password: str) -> Admin:
    """
    Create an admin with hashed password. Username is stored lower-cased.
    """
    admin = Admin(
        username=normalize_username(username),
        hashed_password=get_password_hash(password),
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def save_refresh_token(db: AsyncSession, admin_id: int, token: str) -> None:
    """
    Store a new refresh token for the admin.
    Simple strategy: revoke existing, then insert new.
    """
    await db.execute(
        update(AdminRefreshToken)
        .where(AdminRefreshToken.admin_id == admin_id, AdminRefreshToken.revoked == False)  # noqa: E712
        .values(revoked=True)
    )

    db.add(AdminRefreshToken(admin_id=admin_id, token=token))
    await db.commit()


async def is_refresh_token_active(db: AsyncSession, token: str) -> bool:
    res = await db.execute(
        select(AdminRefreshToken.id).where(
            AdminRefreshToken.token == token,
            AdminRefreshToken.revoked == False,  # noqa: E712
        )
    )
    return res.first() is not None


async def revoke_refresh_token(db: AsyncSession, token: str) -> None:
    """
    Mark a single refresh token as revoked.
    """
    await db.execute(
        update(AdminRefreshToken)
        .where(AdminRefreshToken.token == token, AdminRefreshToken.revoked == False)  # noqa: E712
        .values(revoked=True)
    )
    await db.commit()
