from datetime import date, timedelta

from app.core.dates import month_label, utc_today
from app.db import crud_bookings, crud_dashboard


async def _seed(db, car, other_car, today):
    confirmed = await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Ana",
        start_date=today,
        end_date=today + timedelta(days=2),
        total_price=300,
        status="confirmed",
    )
    pending = await crud_bookings.create_booking(
        db,
        car_id=other_car.id,
        customer_name="Ben",
        start_date=today + timedelta(days=3),
        end_date=today + timedelta(days=20),
        total_price=900,
        status="pending",
    )
    return confirmed, pending


async def test_stats(db, car, other_car):
    today = utc_today()
    await _seed(db, car, other_car, today)

    stats = await crud_dashboard.dashboard_stats(db, today=today)

    assert stats["total_cars"] == 2
    assert stats["total_bookings"] == 2
    assert stats["bookings_this_month"] == 2
    assert stats["confirmed_this_month"] == 1
    assert stats["pending_this_month"] == 1
    assert stats["growth_percent"] == 100.0
    assert stats["unavailable_today"] == 1
    assert stats["available_today"] == 1
    assert stats["upcoming_pickups"] == 2
    assert stats["upcoming_returns"] == 1
    assert stats["revenue_this_month"] == 300.0
    assert stats["avg_booking_duration_days"] == 2.0


async def test_stats_on_empty_database(db):
    stats = await crud_dashboard.dashboard_stats(db, today=date(2025, 6, 15))

    assert stats["total_cars"] == 0
    assert stats["growth_percent"] == 0.0
    assert stats["avg_booking_duration_days"] == 0.0


async def test_monthly_charts_end_with_current_month(db, car, other_car):
    today = utc_today()
    await _seed(db, car, other_car, today)

    counts = await crud_dashboard.monthly_booking_counts(db, months=12, today=today)
    assert len(counts["labels"]) == 12
    assert counts["labels"][-1] == month_label(today.year, today.month)
    assert counts["data"][-1] == 2
    assert sum(counts["data"]) == 2

    growth = await crud_dashboard.monthly_booking_counts(db, months=6, today=today)
    assert len(growth["labels"]) == 6

    by_status = await crud_dashboard.monthly_bookings_by_status(db, today=today)
    assert by_status["pending"][-1] == 1
    assert by_status["confirmed"][-1] == 1


async def test_monthly_revenue_counts_confirmed_only(db, car, other_car):
    today = utc_today()
    await _seed(db, car, other_car, today)

    revenue = await crud_dashboard.monthly_revenue(db, today=today)
    assert revenue["data"][-1] == 300.0


async def test_most_rented_cars(db, car, other_car):
    today = utc_today()
    await _seed(db, car, other_car, today)
    await crud_bookings.create_booking(
        db,
        car_id=car.id,
        customer_name="Cora",
        start_date=today + timedelta(days=30),
        end_date=today + timedelta(days=31),
    )

    ranking = await crud_dashboard.most_rented_cars(db)
    assert ranking == {"labels": ["Toyota Vios", "Mitsubishi Montero"], "data": [2, 1]}


async def test_upcoming_and_recent_lists(db, car, other_car):
    today = utc_today()
    confirmed, pending = await _seed(db, car, other_car, today)

    pickups = await crud_dashboard.upcoming_bookings(db, today=today)
    assert [b.id for b in pickups] == [confirmed.id, pending.id]

    returns = await crud_dashboard.upcoming_returns(db, today=today)
    assert [b.id for b in returns] == [confirmed.id]

    recent = await crud_dashboard.recent_bookings(db)
    assert [b.id for b in recent] == [pending.id, confirmed.id]


async def test_report_selects_overlapping_bookings(db, car, other_car):
    await crud_bookings.create_booking(
        db, car_id=car.id, customer_name="Ana", start_date="2025-06-01", end_date="2025-06-05"
    )
    late = await crud_bookings.create_booking(
        db, car_id=car.id, customer_name="Ben", start_date="2025-06-20", end_date="2025-06-25",
        status="confirmed",
    )
    other = await crud_bookings.create_booking(
        db, car_id=other_car.id, customer_name="Cora", start_date="2025-06-04", end_date="2025-06-21"
    )

    window = await crud_dashboard.list_bookings_for_report(
        db, date_from=date(2025, 6, 10), date_to=date(2025, 6, 22)
    )
    assert [b.id for b in window] == [other.id, late.id]

    confirmed_only = await crud_dashboard.list_bookings_for_report(db, status="confirmed")
    assert [b.id for b in confirmed_only] == [late.id]

    one_car = await crud_dashboard.list_bookings_for_report(db, car_id=other_car.id)
    assert [b.id for b in one_car] == [other.id]
