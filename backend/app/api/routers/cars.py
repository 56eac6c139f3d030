# app/api/routers/cars.py
import os
import shutil
import uuid
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin
from app.core.config import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.db import crud_cars
from app.db.session import get_db
from app.schemas.car import CarCreate, CarImageDelete, CarOut, CarUpdate

router = APIRouter()

IMAGE_EXTENSIONS = {"image/png": ".png", "image/jpeg": ".jpg"}


def _upload_size(img: UploadFile) -> int:
    img.file.seek(0, os.SEEK_END)
    size = img.file.tell()
    img.file.seek(0)
    return size


def _save_uploads(car_id: int, images: List[UploadFile]) -> List[str]:
    """
    Copy uploaded files into STATIC_UPLOAD_DIR and return their public URLs.
    """
    settings = get_settings()
    images = [img for img in images if img.filename]
    for img in images:
        if _upload_size(img) > settings.MAX_UPLOAD_BYTES:
            raise ValidationError(f"{img.filename} is too large (max {settings.MAX_UPLOAD_BYTES} bytes)")

    upload_dir = Path(settings.STATIC_UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    urls: List[str] = []
    for img in images:
        ext = IMAGE_EXTENSIONS.get(img.content_type or "") or Path(img.filename).suffix or ".jpg"
        filename = f"car-{car_id}-{uuid.uuid4().hex[:12]}{ext}"
        dest = upload_dir / filename
        with dest.open("wb") as f:
            shutil.copyfileobj(img.file, f)
        urls.append(f"/static/uploads/{filename}")
    return urls


async def _get_car_or_404(db: AsyncSession, car_id: int):
    car = await crud_cars.get_car(db, car_id)
    if not car:
        raise NotFoundError("Car not found")
    return car


@router.get("", response_model=List[CarOut])
async def list_cars(db: AsyncSession = Depends(get_db)):
    return await crud_cars.list_cars(db)


@router.get("/{car_id}", response_model=CarOut)
async def get_car(car_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_car_or_404(db, car_id)


@router.post("", response_model=CarOut, status_code=status.HTTP_201_CREATED)
async def create_car(
    body: CarCreate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    return await crud_cars.create_car(
        db,
        name=body.name,
        description=body.description,
        price_per_day=body.price_per_day,
    )


@router.put("/{car_id}", response_model=CarOut)
async def update_car(
    car_id: int,
    body: CarUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    car = await _get_car_or_404(db, car_id)
    return await crud_cars.update_car(db, car, body.model_dump())


@router.delete("/{car_id}")
async def delete_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    """
    Deletes the car and its unavailable dates; bookings are kept with car_id=null.
    """
    car = await _get_car_or_404(db, car_id)
    await crud_cars.delete_car(db, car)
    return {"success": True}


@router.post("/{car_id}/images", response_model=CarOut)
async def upload_car_images(
    car_id: int,
    images: List[UploadFile] = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    settings = get_settings()
    if len(images) > settings.MAX_UPLOAD_FILES:
        raise ValidationError(f"At most {settings.MAX_UPLOAD_FILES} images per upload")
    car = await _get_car_or_404(db, car_id)
    urls = _save_uploads(car.id, images)
    if not urls:
        raise ValidationError("No files uploaded")
    return await crud_cars.add_car_images(db, car, urls)


@router.delete("/{car_id}/images", response_model=CarOut)
async def delete_car_image(
    car_id: int,
    body: CarImageDelete,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(get_current_admin),
):
    car = await _get_car_or_404(db, car_id)
    return await crud_cars.remove_car_image(db, car, body.url)
