# app/db/models.py

from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Text,
    ForeignKey,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


BOOKING_STATUSES = ("pending", "confirmed")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)

    # always stored trimmed + lower-cased
    username = Column(String(150), unique=True, index=True, nullable=False)

    # DB column name: password_hash
    # Python attribute: hashed_password
    hashed_password = Column("password_hash", String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    refresh_tokens = relationship(
        "AdminRefreshToken",
        back_populates="admin",
        cascade="all,delete-orphan",
        passive_deletes=True,
    )


class Car(Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price_per_day = Column(Numeric(10, 2), nullable=False)

    # list[str] as JSON in DB, kept in upload order
    image_urls = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    bookings = relationship("Booking", back_populates="car", passive_deletes=True)

    unavailable_dates = relationship(
        "UnavailableDate",
        back_populates="car",
        cascade="all,delete-orphan",
        passive_deletes=True,
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    # NULL once the car has been deleted; the booking itself is kept
    car_id = Column(
        Integer,
        ForeignKey("cars.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    customer_name = Column(String(255), nullable=False)
    contact = Column(String(255), nullable=False, default="")

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    total_price = Column(Numeric(10, 2), nullable=True)

    # "pending" | "confirmed"
    status = Column(String(20), nullable=False, default="pending", index=True)
    source = Column(String(50), nullable=False, default="manual")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    car = relationship("Car", back_populates="bookings")

    blocked_dates = relationship(
        "UnavailableDate",
        back_populates="booking",
        passive_deletes=True,
    )


class UnavailableDate(Base):
    """
    One row per blocked day per car. Rows with a booking_id are owned by a
    confirmed booking; rows without one are admin blackout dates.
    """

    __tablename__ = "unavailable_dates"
    __table_args__ = (
        UniqueConstraint("car_id", "date", name="uq_unavailable_dates_car_date"),
    )

    id = Column(Integer, primary_key=True, index=True)

    car_id = Column(
        Integer,
        ForeignKey("cars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(Date, nullable=False)
    reason = Column(String(50), nullable=False, default="")

    booking_id = Column(
        Integer,
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    car = relationship("Car", back_populates="unavailable_dates")
    booking = relationship("Booking", back_populates="blocked_dates")


class AdminRefreshToken(Base):
    __tablename__ = "admin_refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)

    admin_id = Column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    revoked = Column(Boolean, nullable=False, default=False)

    admin = relationship("Admin", back_populates="refresh_tokens")
