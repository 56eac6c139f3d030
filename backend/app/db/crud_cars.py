# app/db/crud_cars.py
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Booking, Car, UnavailableDate


async def list_cars(db: AsyncSession) -> List[Car]:
    res = await db.execute(select(Car).order_by(Car.created_at.desc(), Car.id.desc()))
    return list(res.scalars().all())


async def get_car(db: AsyncSession, car_id: int) -> Optional[Car]:
    res = await db.execute(select(Car).where(Car.id == car_id))
    return res.scalars().first()


async def create_car(db: AsyncSession, **kwargs) -> Car:
    kwargs.setdefault("description", "")
    kwargs.setdefault("image_urls", [])
    car = Car(**kwargs)
    db.add(car)
    await db.commit()
    await db.refresh(car)
    return car


async def update_car(db: AsyncSession, car: Car, data: dict) -> Car:
    for k, v in data.items():
        if v is not None:
            setattr(car, k, v)
    db.add(car)
    await db.commit()
    await db.refresh(car)
    return car


async def delete_car(db: AsyncSession, car: Car) -> None:
    """
    Delete a car and its unavailable dates. Its bookings stay, detached
    from the car (car_id becomes NULL).
    """
    await db.execute(delete(UnavailableDate).where(UnavailableDate.car_id == car.id))
    await db.execute(update(Booking).where(Booking.car_id == car.id).values(car_id=None))
    await db.delete(car)
    await db.commit()


async def add_car_images(db: AsyncSession, car: Car, urls: List[str]) -> Car:
    # JSON columns are not mutation-tracked, assign a new list
    car.image_urls = list(car.image_urls or []) + list(urls)
    db.add(car)
    await db.commit()
    await db.refresh(car)
    return car


async def remove_car_image(db: AsyncSession, car: Car, url: str) -> Car:
    car.image_urls = [u for u in (car.image_urls or []) if u != url]
    db.add(car)
    await db.commit()
    await db.refresh(car)
    return car
