# scripts/seed.py
import asyncio

from app.db.base import Base
from app.db.session import AsyncSessionLocal, engine
from app.db import models  # noqa: F401  registers tables
from app.db.crud_admins import create_admin, get_admin_by_username
from app.db.crud_cars import create_car, list_cars

SAMPLE_CARS = [
    ("Toyota Vios", "Automatic sedan, seats 5", 1800),
    ("Mitsubishi Montero", "7-seater SUV", 3500),
    ("Toyota Hiace", "Van, seats 12", 4500),
]


async def seed():
    # create tables (if migrations not run)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        if await get_admin_by_username(db, "admin"):
            print("Admin already exists")
        else:
            await create_admin(db, "admin", "admin123")
            print("Admin created: username=admin, password=admin123")

        if not await list_cars(db):
            for name, description, price in SAMPLE_CARS:
                await create_car(db, name=name, description=description, price_per_day=price)
        print("Seed complete")


if __name__ == "__main__":
    asyncio.run(seed())
