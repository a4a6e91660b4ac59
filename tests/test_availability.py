from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.availability import (
    Availability, as_utc_naive, calendar_day, check_restaurant, check_room, check_spa, overlaps,
)

ROOM = SimpleNamespace(id=1)
SPA = SimpleNamespace(id=7)


def day(d, hour=0):
    return datetime(2030, 1, d, hour)

def stay(check_in, check_out, room_type_id=1):
    return SimpleNamespace(room_type_id=room_type_id, check_in_date=check_in, check_out_date=check_out)

def spa_booking(date, time, service_id=7):
    return SimpleNamespace(service_id=service_id, date=date, time=time)

def table(date, time, meal_period, party_size):
    return SimpleNamespace(date=date, time=time, meal_period=meal_period, party_size=party_size)


def test_overlap_is_half_open():
    existing = (day(10), day(15))
    assert not overlaps(day(15), day(20), *existing)   # starts when the other ends
    assert not overlaps(day(5), day(10), *existing)    # ends when the other starts
    assert overlaps(day(14), day(16), *existing)       # start inside
    assert overlaps(day(8), day(11), *existing)        # end inside
    assert overlaps(day(9), day(16), *existing)        # contains
    assert overlaps(day(11), day(12), *existing)       # contained
    assert overlaps(day(10), day(15), *existing)       # identical

def test_room_touching_stays_do_not_count():
    bookings = [stay(day(10), day(15)) for _ in range(3)]
    assert check_room(ROOM, bookings, day(15), day(20), 3) is Availability.AVAILABLE
    assert check_room(ROOM, bookings, day(14), day(16), 3) is Availability.UNAVAILABLE

def test_room_admits_below_capacity():
    bookings = [stay(day(10), day(15)) for _ in range(2)]
    assert check_room(ROOM, bookings, day(14), day(16), 3) is Availability.AVAILABLE

def test_room_ignores_other_room_types():
    bookings = [stay(day(10), day(15), room_type_id=2) for _ in range(5)]
    assert check_room(ROOM, bookings, day(11), day(12), 3) is Availability.AVAILABLE

def test_room_not_found():
    assert check_room(None, [], day(1), day(2), 3) is Availability.NOT_FOUND

def test_room_capacity_is_a_parameter():
    bookings = [stay(day(10), day(15))]
    assert check_room(ROOM, bookings, day(11), day(12), 1) is Availability.UNAVAILABLE
    assert check_room(ROOM, bookings, day(11), day(12), 2) is Availability.AVAILABLE

def test_spa_counts_same_date_and_exact_label():
    bookings = [spa_booking(day(10, 9), "9:00 AM") for _ in range(3)]
    # time-of-day of the stored timestamp is ignored, only the calendar date matters
    assert check_spa(SPA, bookings, day(10, 18), "9:00 AM", 3) is Availability.UNAVAILABLE
    assert check_spa(SPA, bookings, day(11), "9:00 AM", 3) is Availability.AVAILABLE
    assert check_spa(SPA, bookings, day(10), "9:30 AM", 3) is Availability.AVAILABLE
    # labels are not parsed
    assert check_spa(SPA, bookings, day(10), "09:00 AM", 3) is Availability.AVAILABLE

def test_spa_other_service_does_not_count():
    bookings = [spa_booking(day(10), "9:00 AM", service_id=8) for _ in range(3)]
    assert check_spa(SPA, bookings, day(10), "9:00 AM", 3) is Availability.AVAILABLE

def test_spa_not_found():
    assert check_spa(None, [], day(10), "9:00 AM", 3) is Availability.NOT_FOUND

def test_restaurant_sums_party_sizes():
    bookings = [table(day(10), "7:00 PM", "dinner", 24), table(day(10), "7:00 PM", "dinner", 24)]
    assert check_restaurant(bookings, day(10), "7:00 PM", "dinner", 2, 50) is Availability.AVAILABLE
    assert check_restaurant(bookings, day(10), "7:00 PM", "dinner", 5, 50) is Availability.UNAVAILABLE

def test_restaurant_groups_by_date_time_and_meal_period():
    bookings = [table(day(10), "7:00 PM", "dinner", 48)]
    assert check_restaurant(bookings, day(10), "7:00 PM", "lunch", 10, 50) is Availability.AVAILABLE
    assert check_restaurant(bookings, day(10), "7:30 PM", "dinner", 10, 50) is Availability.AVAILABLE
    assert check_restaurant(bookings, day(11), "7:00 PM", "dinner", 10, 50) is Availability.AVAILABLE

def test_restaurant_single_party_over_capacity():
    assert check_restaurant([], day(10), "7:00 PM", "dinner", 51, 50) is Availability.UNAVAILABLE
    assert check_restaurant([], day(10), "7:00 PM", "dinner", 50, 50) is Availability.AVAILABLE

def test_calendar_day_uses_utc():
    late_evening_west = datetime(2030, 1, 10, 20, tzinfo=timezone(timedelta(hours=-8)))
    assert calendar_day(late_evening_west).day == 11
    assert calendar_day(datetime(2030, 1, 10, 23, 59)).day == 10

def test_as_utc_naive():
    aware = datetime(2030, 1, 10, 12, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc_naive(aware) == datetime(2030, 1, 10, 10)
    assert as_utc_naive(datetime(2030, 1, 10, 12)) == datetime(2030, 1, 10, 12)
