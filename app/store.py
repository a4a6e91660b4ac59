"""
Persistence boundary for users, catalog entries and the three booking kinds.

BookingStore is the interface the booking service depends on. MemoryStore
keeps rows in ordered dicts keyed by auto-incrementing ids (tests, demos);
SqlStore runs against a SQLAlchemy session.

The insert_*_booking methods are conditional inserts: the capacity rule and
the insert happen as one atomic step and None is returned when the rule
rejects the row. This keeps two concurrent submissions from both passing a
separate availability read and overfilling a slot.
"""
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from sqlalchemy import text, bindparam, DateTime
from sqlalchemy.orm import Session

from app import availability
from app.availability import Availability
from app.models import (
    BOOKING_MODELS, BookingKind, User, RoomType, SpaService, RestaurantMenu,
    RoomBooking, SpaBooking, RestaurantBooking,
)

# Column used for "most recent activity first" ordering of a user's bookings.
ACTIVITY_COLUMN = {
    BookingKind.ROOM: "check_in_date",
    BookingKind.SPA: "date",
    BookingKind.RESTAURANT: "date",
}


def day_bounds(ts: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(availability.calendar_day(ts), datetime.min.time())
    return start, start + timedelta(days=1)


class BookingStore(ABC):

    # users
    @abstractmethod
    def create_user(self, **fields) -> User: ...

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    # catalog
    @abstractmethod
    def create_room_type(self, **fields) -> RoomType: ...

    @abstractmethod
    def list_room_types(self) -> list[RoomType]: ...

    @abstractmethod
    def get_room_type(self, room_type_id: int) -> RoomType | None: ...

    @abstractmethod
    def create_spa_service(self, **fields) -> SpaService: ...

    @abstractmethod
    def list_spa_services(self) -> list[SpaService]: ...

    @abstractmethod
    def get_spa_service(self, service_id: int) -> SpaService | None: ...

    @abstractmethod
    def create_restaurant_menu(self, **fields) -> RestaurantMenu: ...

    @abstractmethod
    def list_restaurant_menus(self) -> list[RestaurantMenu]: ...

    @abstractmethod
    def get_restaurant_menu(self, menu_id: int) -> RestaurantMenu | None: ...

    # bookings, any kind
    @abstractmethod
    def list_bookings(self, kind: BookingKind) -> list: ...

    @abstractmethod
    def list_bookings_by_user(self, kind: BookingKind, user_id: int) -> list: ...

    @abstractmethod
    def get_booking(self, kind: BookingKind, booking_id: int): ...

    @abstractmethod
    def update_status(self, kind: BookingKind, booking_id: int, status: str):
        """Set the status of a booking; None when the id is unknown."""

    # scans feeding the availability checks
    @abstractmethod
    def room_bookings_for_type(self, room_type_id: int) -> list[RoomBooking]: ...

    @abstractmethod
    def spa_bookings_for_service(self, service_id: int, day: datetime) -> list[SpaBooking]: ...

    @abstractmethod
    def restaurant_bookings_for_day(self, day: datetime) -> list[RestaurantBooking]: ...

    # conditional inserts
    @abstractmethod
    def insert_room_booking(self, values: dict, capacity: int) -> RoomBooking | None: ...

    @abstractmethod
    def insert_spa_booking(self, values: dict, capacity: int) -> SpaBooking | None: ...

    @abstractmethod
    def insert_restaurant_booking(self, values: dict, seats: int) -> RestaurantBooking | None: ...


class MemoryStore(BookingStore):

    def __init__(self):
        self._lock = threading.Lock()
        models = (User, RoomType, SpaService, RestaurantMenu, RoomBooking, SpaBooking, RestaurantBooking)
        self._rows = {model: {} for model in models}
        self._next_id = {model: 1 for model in models}

    def _add(self, model, fields: dict):
        row = model(id=self._next_id[model], **fields)
        self._next_id[model] += 1
        self._rows[model][row.id] = row
        return row

    def create_user(self, **fields) -> User:
        fields.setdefault("role", "user")
        with self._lock:
            return self._add(User, fields)

    def get_user(self, user_id):
        return self._rows[User].get(user_id)

    def list_users(self):
        return list(self._rows[User].values())

    def create_room_type(self, **fields):
        with self._lock:
            return self._add(RoomType, fields)

    def list_room_types(self):
        return list(self._rows[RoomType].values())

    def get_room_type(self, room_type_id):
        return self._rows[RoomType].get(room_type_id)

    def create_spa_service(self, **fields):
        with self._lock:
            return self._add(SpaService, fields)

    def list_spa_services(self):
        return list(self._rows[SpaService].values())

    def get_spa_service(self, service_id):
        return self._rows[SpaService].get(service_id)

    def create_restaurant_menu(self, **fields):
        with self._lock:
            return self._add(RestaurantMenu, fields)

    def list_restaurant_menus(self):
        return list(self._rows[RestaurantMenu].values())

    def get_restaurant_menu(self, menu_id):
        return self._rows[RestaurantMenu].get(menu_id)

    def list_bookings(self, kind):
        return list(self._rows[BOOKING_MODELS[kind]].values())

    def list_bookings_by_user(self, kind, user_id):
        column = ACTIVITY_COLUMN[kind]
        rows = [b for b in self.list_bookings(kind) if b.user_id == user_id]
        return sorted(rows, key=lambda b: (getattr(b, column), b.id), reverse=True)

    def get_booking(self, kind, booking_id):
        return self._rows[BOOKING_MODELS[kind]].get(booking_id)

    def update_status(self, kind, booking_id, status):
        with self._lock:
            booking = self.get_booking(kind, booking_id)
            if booking is not None:
                booking.status = status
            return booking

    def room_bookings_for_type(self, room_type_id):
        return [b for b in self._rows[RoomBooking].values() if b.room_type_id == room_type_id]

    def spa_bookings_for_service(self, service_id, day):
        day = availability.calendar_day(day)
        return [
            b for b in self._rows[SpaBooking].values()
            if b.service_id == service_id and availability.calendar_day(b.date) == day
        ]

    def restaurant_bookings_for_day(self, day):
        day = availability.calendar_day(day)
        return [b for b in self._rows[RestaurantBooking].values() if availability.calendar_day(b.date) == day]

    def insert_room_booking(self, values, capacity):
        with self._lock:
            verdict = availability.check_room(
                self.get_room_type(values["room_type_id"]),
                self.room_bookings_for_type(values["room_type_id"]),
                values["check_in_date"], values["check_out_date"], capacity,
            )
            if verdict is not Availability.AVAILABLE:
                return None
            return self._add(RoomBooking, values)

    def insert_spa_booking(self, values, capacity):
        with self._lock:
            verdict = availability.check_spa(
                self.get_spa_service(values["service_id"]),
                self.spa_bookings_for_service(values["service_id"], values["date"]),
                values["date"], values["time"], capacity,
            )
            if verdict is not Availability.AVAILABLE:
                return None
            return self._add(SpaBooking, values)

    def insert_restaurant_booking(self, values, seats):
        with self._lock:
            verdict = availability.check_restaurant(
                self.restaurant_bookings_for_day(values["date"]),
                values["date"], values["time"], values["meal_period"],
                values["party_size"], seats,
            )
            if verdict is not Availability.AVAILABLE:
                return None
            return self._add(RestaurantBooking, values)


# Single-statement conditional inserts, same rules as app.availability.
# Given check_in < check_out, NOT (out <= in' OR in >= out') is the
# three-clause overlap test.
INSERT_ROOM_BOOKING = text("""
    INSERT INTO room_bookings (
        user_id, room_type_id, guest_name, guest_email, guest_phone,
        check_in_date, check_out_date, adults, children, special_requests,
        total_price, status, created_at
    )
    SELECT :user_id, :room_type_id, :guest_name, :guest_email, :guest_phone,
           :check_in_date, :check_out_date, :adults, :children, :special_requests,
           :total_price, :status, :created_at
    WHERE EXISTS (
        SELECT 1 FROM room_types t WHERE t.id = :room_type_id
    )
    AND (
        SELECT COUNT(*) FROM room_bookings b
        WHERE b.room_type_id = :room_type_id
          AND NOT (b.check_out_date <= :check_in_date OR b.check_in_date >= :check_out_date)
    ) < :capacity
""").bindparams(
    bindparam("check_in_date", type_=DateTime),
    bindparam("check_out_date", type_=DateTime),
    bindparam("created_at", type_=DateTime),
)

INSERT_SPA_BOOKING = text("""
    INSERT INTO spa_bookings (
        user_id, service_id, guest_name, guest_email, guest_phone,
        date, time, participants, special_requests, total_price, status, created_at
    )
    SELECT :user_id, :service_id, :guest_name, :guest_email, :guest_phone,
           :date, :time, :participants, :special_requests, :total_price, :status, :created_at
    WHERE EXISTS (
        SELECT 1 FROM spa_services s WHERE s.id = :service_id
    )
    AND (
        SELECT COUNT(*) FROM spa_bookings b
        WHERE b.service_id = :service_id
          AND b.date >= :day_start AND b.date < :day_end
          AND b.time = :time
    ) < :capacity
""").bindparams(
    bindparam("date", type_=DateTime),
    bindparam("day_start", type_=DateTime),
    bindparam("day_end", type_=DateTime),
    bindparam("created_at", type_=DateTime),
)

INSERT_RESTAURANT_BOOKING = text("""
    INSERT INTO restaurant_bookings (
        user_id, guest_name, guest_email, guest_phone, date, time,
        party_size, meal_period, special_requests, status, created_at
    )
    SELECT :user_id, :guest_name, :guest_email, :guest_phone, :date, :time,
           :party_size, :meal_period, :special_requests, :status, :created_at
    WHERE COALESCE((
        SELECT SUM(b.party_size) FROM restaurant_bookings b
        WHERE b.date >= :day_start AND b.date < :day_end
          AND b.time = :time
          AND b.meal_period = :meal_period
    ), 0) + :party_size <= :seats
""").bindparams(
    bindparam("date", type_=DateTime),
    bindparam("day_start", type_=DateTime),
    bindparam("day_end", type_=DateTime),
    bindparam("created_at", type_=DateTime),
)


class SqlStore(BookingStore):

    def __init__(self, db: Session):
        self.db = db

    def _create(self, model, fields: dict):
        row = model(**fields)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _list(self, model):
        return self.db.query(model).order_by(model.id).all()

    def create_user(self, **fields):
        return self._create(User, fields)

    def get_user(self, user_id):
        return self.db.get(User, user_id)

    def list_users(self):
        return self._list(User)

    def create_room_type(self, **fields):
        return self._create(RoomType, fields)

    def list_room_types(self):
        return self._list(RoomType)

    def get_room_type(self, room_type_id):
        return self.db.get(RoomType, room_type_id)

    def create_spa_service(self, **fields):
        return self._create(SpaService, fields)

    def list_spa_services(self):
        return self._list(SpaService)

    def get_spa_service(self, service_id):
        return self.db.get(SpaService, service_id)

    def create_restaurant_menu(self, **fields):
        return self._create(RestaurantMenu, fields)

    def list_restaurant_menus(self):
        return self._list(RestaurantMenu)

    def get_restaurant_menu(self, menu_id):
        return self.db.get(RestaurantMenu, menu_id)

    def list_bookings(self, kind):
        return self._list(BOOKING_MODELS[kind])

    def list_bookings_by_user(self, kind, user_id):
        model = BOOKING_MODELS[kind]
        column = getattr(model, ACTIVITY_COLUMN[kind])
        return (
            self.db.query(model)
            .filter(model.user_id == user_id)
            .order_by(column.desc(), model.id.desc())
            .all()
        )

    def get_booking(self, kind, booking_id):
        return self.db.get(BOOKING_MODELS[kind], booking_id)

    def update_status(self, kind, booking_id, status):
        booking = self.get_booking(kind, booking_id)
        if booking is None:
            return None
        booking.status = status
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def room_bookings_for_type(self, room_type_id):
        return self.db.query(RoomBooking).filter(RoomBooking.room_type_id == room_type_id).all()

    def spa_bookings_for_service(self, service_id, day):
        start, end = day_bounds(day)
        return (
            self.db.query(SpaBooking)
            .filter(SpaBooking.service_id == service_id, SpaBooking.date >= start, SpaBooking.date < end)
            .all()
        )

    def restaurant_bookings_for_day(self, day):
        start, end = day_bounds(day)
        return (
            self.db.query(RestaurantBooking)
            .filter(RestaurantBooking.date >= start, RestaurantBooking.date < end)
            .all()
        )

    def _insert(self, statement, model, params: dict):
        res = self.db.execute(statement, params)
        self.db.commit()
        if res.rowcount != 1:
            return None
        return self.db.get(model, res.lastrowid)

    def insert_room_booking(self, values, capacity):
        return self._insert(INSERT_ROOM_BOOKING, RoomBooking, {**values, "capacity": capacity})

    def insert_spa_booking(self, values, capacity):
        start, end = day_bounds(values["date"])
        params = {**values, "capacity": capacity, "day_start": start, "day_end": end}
        return self._insert(INSERT_SPA_BOOKING, SpaBooking, params)

    def insert_restaurant_booking(self, values, seats):
        start, end = day_bounds(values["date"])
        params = {**values, "seats": seats, "day_start": start, "day_end": end}
        return self._insert(INSERT_RESTAURANT_BOOKING, RestaurantBooking, params)
