from datetime import date

import pytest

from app.core.errors import ValidationError
from app.db import crud_availability, crud_bookings

from conftest import ledger_rows


async def test_marking_twice_keeps_one_row(db, car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"])
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"])

    rows = await ledger_rows(db, car.id)
    assert [r.date for r in rows] == [date(2025, 6, 10)]
    assert rows[0].reason == "manual"
    assert rows[0].booking_id is None


async def test_mark_returns_blocked_count_over_requested_span(db, car):
    assert await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"]) == 1
    # 06-10 was already there, so the span 06-09..06-11 now holds three rows
    assert await crud_availability.mark_unavailable(db, car.id, ["2025-06-09", "2025-06-11"]) == 3


async def test_mark_then_list_month(db, car, other_car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10", "2025-06-21"])
    await crud_availability.mark_unavailable(db, car.id, ["2025-07-01"])
    await crud_availability.mark_unavailable(db, other_car.id, ["2025-06-15"])

    june = await crud_availability.list_unavailable(db, car.id, 2025, 6)
    assert june == ["2025-06-10", "2025-06-21"]
    assert await crud_availability.list_unavailable(db, car.id, 2025, 5) == []


async def test_list_month_for_car_without_rows(db, car):
    assert await crud_availability.list_unavailable(db, car.id, 2025, 6) == []


async def test_list_month_includes_month_edges(db, car):
    await crud_availability.mark_unavailable(db, car.id, ["2024-02-01", "2024-02-29", "2024-03-01"])
    assert await crud_availability.list_unavailable(db, car.id, 2024, 2) == ["2024-02-01", "2024-02-29"]


async def test_conflict_detection_against_blackout(db, car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"])

    assert await crud_availability.check_conflict(db, car.id, "2025-06-09", "2025-06-11") is False
    assert await crud_availability.check_conflict(db, car.id, "2025-06-11", "2025-06-12") is True


async def test_blackout_is_per_car(db, car, other_car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"])
    assert await crud_availability.check_conflict(db, other_car.id, "2025-06-10", "2025-06-10") is True


async def test_inverted_range_is_reported_available(db, car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10"])
    assert await crud_availability.check_conflict(db, car.id, "2025-06-11", "2025-06-09") is True


async def test_check_conflict_requires_all_arguments(db, car):
    with pytest.raises(ValidationError):
        await crud_availability.check_conflict(db, car.id, None, "2025-06-10")
    with pytest.raises(ValidationError):
        await crud_availability.check_conflict(db, None, "2025-06-10", "2025-06-10")


async def test_booking_does_not_conflict_with_itself(db, car):
    booking = await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Ana",
        start_date="2025-07-01",
        end_date="2025-07-03",
        status="confirmed",
    )

    assert await crud_availability.check_conflict(db, car.id, "2025-07-01", "2025-07-03") is False
    assert (
        await crud_availability.check_conflict(
            db, car.id, "2025-07-01", "2025-07-03", exclude_booking_id=booking.id
        )
        is True
    )


async def test_excluding_a_booking_still_sees_blackouts(db, car):
    booking = await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Ana",
        start_date="2025-07-01",
        end_date="2025-07-03",
        status="confirmed",
    )
    await crud_availability.mark_unavailable(db, car.id, ["2025-07-04"])

    assert (
        await crud_availability.check_conflict(
            db, car.id, "2025-07-02", "2025-07-04", exclude_booking_id=booking.id
        )
        is False
    )


async def test_unmark_removes_rows(db, car):
    await crud_availability.mark_unavailable(db, car.id, ["2025-06-10", "2025-06-11", "2025-06-12"])

    removed = await crud_availability.unmark_unavailable(db, car.id, ["2025-06-10", "2025-06-12", "2025-06-30"])

    assert removed == 2
    assert [r.date for r in await ledger_rows(db, car.id)] == [date(2025, 6, 11)]


async def test_unmark_removes_booking_rows_by_default(db, car):
    await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Ana",
        start_date="2025-07-01",
        end_date="2025-07-02",
        status="confirmed",
    )

    assert await crud_availability.unmark_unavailable(db, car.id, ["2025-07-01"]) == 1


async def test_unmark_can_protect_booking_rows(db, car):
    await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Ana",
        start_date="2025-07-01",
        end_date="2025-07-02",
        status="confirmed",
    )
    await crud_availability.mark_unavailable(db, car.id, ["2025-07-05"])

    removed = await crud_availability.unmark_unavailable(
        db, car.id, ["2025-07-01", "2025-07-05"], protect_booking_dates=True
    )

    assert removed == 1
    assert [r.date for r in await ledger_rows(db, car.id)] == [date(2025, 7, 1), date(2025, 7, 2)]


async def test_mark_and_unmark_need_dates(db, car):
    with pytest.raises(ValidationError):
        await crud_availability.mark_unavailable(db, car.id, [])
    with pytest.raises(ValidationError):
        await crud_availability.unmark_unavailable(db, None, ["2025-06-10"])
