import os
import tempfile

# Settings and the engine are created at import time, so point them at a
# throwaway database before anything from app is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="carrental-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ["STATIC_UPLOAD_DIR"] = os.path.join(_TMP_DIR, "static", "uploads")

import httpx  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402

from app.main import app  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.db import crud_admins, crud_cars  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.models import Booking, UnavailableDate  # noqa: E402
from app.db.session import AsyncSessionLocal, engine  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """
    Fresh schema per test, and a session for arranging and inspecting data.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def admin(db):
    return await crud_admins.create_admin(db, "admin", "admin123")


@pytest_asyncio.fixture
async def auth_headers(admin):
    token = create_access_token({"admin_id": admin.id})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def car(db):
    return await crud_cars.create_car(db, name="Toyota Vios", price_per_day=1800)


@pytest_asyncio.fixture
async def other_car(db):
    return await crud_cars.create_car(db, name="Mitsubishi Montero", price_per_day=3500)


async def ledger_rows(db, car_id):
    res = await db.execute(
        select(UnavailableDate)
        .where(UnavailableDate.car_id == car_id)
        .order_by(UnavailableDate.date.asc())
        .execution_options(populate_existing=True)
    )
    return list(res.scalars().all())


async def all_bookings(db):
    res = await db.execute(
        select(Booking).order_by(Booking.id.asc()).execution_options(populate_existing=True)
    )
    return list(res.scalars().all())
