"""
Capacity checks for the three booking kinds.

All checks are pure: they receive the catalog entry (or None) and a snapshot
of existing booking rows and return an Availability verdict. Capacity is a
counter per coarse grouping key, not real inventory:

  - room:       room type, overlapping stays counted against N rooms
  - spa:        service + calendar date + slot label, counted against N sessions
  - restaurant: calendar date + slot label + meal period, seats summed against N
"""
import enum
from datetime import date, datetime, timezone
from typing import Iterable


class Availability(str, enum.Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"


def as_utc_naive(ts: datetime) -> datetime:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def calendar_day(ts: datetime | date) -> date:
    """UTC calendar date of a timestamp; naive values are taken as UTC."""
    if isinstance(ts, datetime):
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc)
        return ts.date()
    return ts


def overlaps(check_in: datetime, check_out: datetime, existing_in: datetime, existing_out: datetime) -> bool:
    # Half-open intervals: a stay ending when another begins does not overlap.
    return (
        (existing_in <= check_in < existing_out)
        or (existing_in < check_out <= existing_out)
        or (check_in <= existing_in and check_out >= existing_out)
    )


def check_room(room_type, bookings: Iterable, check_in: datetime, check_out: datetime, capacity: int) -> Availability:
    if room_type is None:
        return Availability.NOT_FOUND
    taken = sum(
        1 for b in bookings
        if b.room_type_id == room_type.id
        and overlaps(check_in, check_out, b.check_in_date, b.check_out_date)
    )
    return Availability.AVAILABLE if taken < capacity else Availability.UNAVAILABLE


def check_spa(service, bookings: Iterable, day: datetime | date, time: str, capacity: int) -> Availability:
    if service is None:
        return Availability.NOT_FOUND
    day = calendar_day(day)
    taken = sum(
        1 for b in bookings
        if b.service_id == service.id
        and calendar_day(b.date) == day
        and b.time == time
    )
    return Availability.AVAILABLE if taken < capacity else Availability.UNAVAILABLE


def seats_taken(bookings: Iterable, day: datetime | date, time: str, meal_period: str) -> int:
    day = calendar_day(day)
    return sum(
        b.party_size for b in bookings
        if calendar_day(b.date) == day
        and b.time == time
        and b.meal_period == meal_period
    )


def check_restaurant(bookings: Iterable, day: datetime | date, time: str, meal_period: str,
                     party_size: int, seats: int) -> Availability:
    if seats_taken(bookings, day, time, meal_period) + party_size <= seats:
        return Availability.AVAILABLE
    return Availability.UNAVAILABLE
