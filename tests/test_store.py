import threading
from datetime import datetime

import pytest

from app.models import BookingKind, utcnow
from app.store import MemoryStore, SqlStore


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryStore()
    return SqlStore(request.getfixturevalue("test_db_session"))


def guest(**extra):
    values = dict(
        user_id=None, guest_name="Ada Guest", guest_email="ada@example.com",
        guest_phone=None, special_requests=None, status="confirmed", created_at=utcnow(),
    )
    values.update(extra)
    return values

def room_values(room_type_id, check_in, check_out, **extra):
    return guest(room_type_id=room_type_id, check_in_date=check_in, check_out_date=check_out,
                 adults=2, children=0, total_price=299, **extra)

def spa_values(service_id, date, time, **extra):
    return guest(service_id=service_id, date=date, time=time, participants=1, total_price=132, **extra)

def table_values(date, time, meal_period, party_size, **extra):
    return guest(date=date, time=time, meal_period=meal_period, party_size=party_size, **extra)

def make_room_type(store):
    return store.create_room_type(name="Deluxe Room", description="d", price=299, capacity=2,
                                  size=45, amenities=["Wi-Fi"], image_url=None)

def make_spa_service(store):
    return store.create_spa_service(name="Swedish Massage", description="d", duration=60, price=120,
                                    image_url=None)


def test_room_insert_stops_at_capacity(store):
    rt = make_room_type(store)
    jan10, jan15 = datetime(2030, 1, 10), datetime(2030, 1, 15)
    for _ in range(3):
        assert store.insert_room_booking(room_values(rt.id, jan10, jan15), 3) is not None
    assert store.insert_room_booking(room_values(rt.id, datetime(2030, 1, 14), datetime(2030, 1, 16)), 3) is None
    # touching stay is still free
    touching = store.insert_room_booking(room_values(rt.id, jan15, datetime(2030, 1, 20)), 3)
    assert touching is not None
    assert touching.check_in_date == jan15
    assert len(store.list_bookings(BookingKind.ROOM)) == 4

def test_room_insert_requires_existing_room_type(store):
    assert store.insert_room_booking(room_values(999, datetime(2030, 1, 10), datetime(2030, 1, 11)), 3) is None

def test_spa_insert_counts_per_day_and_label(store):
    svc = make_spa_service(store)
    for hour in (9, 10, 11):
        # stored time-of-day differs, calendar date is the same
        assert store.insert_spa_booking(spa_values(svc.id, datetime(2030, 2, 1, hour), "9:00 AM"), 3) is not None
    assert store.insert_spa_booking(spa_values(svc.id, datetime(2030, 2, 1), "9:00 AM"), 3) is None
    assert store.insert_spa_booking(spa_values(svc.id, datetime(2030, 2, 1), "9:30 AM"), 3) is not None
    assert store.insert_spa_booking(spa_values(svc.id, datetime(2030, 2, 2), "9:00 AM"), 3) is not None

def test_restaurant_insert_sums_seats(store):
    date = datetime(2030, 3, 1)
    assert store.insert_restaurant_booking(table_values(date, "7:00 PM", "dinner", 48), 50) is not None
    assert store.insert_restaurant_booking(table_values(date, "7:00 PM", "dinner", 5), 50) is None
    assert store.insert_restaurant_booking(table_values(date, "7:00 PM", "dinner", 2), 50) is not None
    assert store.insert_restaurant_booking(table_values(date, "7:00 PM", "lunch", 30), 50) is not None

def test_list_by_user_newest_activity_first(store):
    user = store.create_user(username="ada", full_name="Ada", email="ada@example.com", phone=None, role="user")
    rt = make_room_type(store)
    for d in (5, 20, 12):
        store.insert_room_booking(room_values(rt.id, datetime(2030, 1, d), datetime(2030, 1, d + 1), user_id=user.id), 3)
    store.insert_room_booking(room_values(rt.id, datetime(2030, 1, 25), datetime(2030, 1, 26)), 3)

    mine = store.list_bookings_by_user(BookingKind.ROOM, user.id)
    assert [b.check_in_date.day for b in mine] == [20, 12, 5]

def test_update_status(store):
    date = datetime(2030, 3, 1)
    booking = store.insert_restaurant_booking(table_values(date, "8:00 AM", "breakfast", 2), 50)
    updated = store.update_status(BookingKind.RESTAURANT, booking.id, "checked-in")
    assert updated.status == "checked-in"
    assert store.get_booking(BookingKind.RESTAURANT, booking.id).status == "checked-in"
    assert store.update_status(BookingKind.RESTAURANT, 999, "cancelled") is None

def test_memory_store_concurrent_inserts_respect_capacity():
    store = MemoryStore()
    rt = make_room_type(store)
    values = room_values(rt.id, datetime(2030, 1, 10), datetime(2030, 1, 15))
    results = []

    def submit():
        results.append(store.insert_room_booking(dict(values), 3))

    threads = [threading.Thread(target=submit) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r is not None) == 3
    assert len(store.list_bookings(BookingKind.ROOM)) == 3

def test_ids_are_per_collection(store):
    rt = make_room_type(store)
    room = store.insert_room_booking(room_values(rt.id, datetime(2030, 1, 1), datetime(2030, 1, 2)), 3)
    table = store.insert_restaurant_booking(table_values(datetime(2030, 1, 1), "1:00 PM", "lunch", 2), 50)
    assert room.id == 1
    assert table.id == 1
    assert store.get_booking(BookingKind.SPA, 1) is None
