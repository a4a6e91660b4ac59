import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, ForeignKey, CheckConstraint

from app.db import Base


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked-in"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MealPeriod(str, enum.Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class BookingKind(str, enum.Enum):
    ROOM = "room"
    SPA = "spa"
    RESTAURANT = "restaurant"


_STATUS_CHECK = "status in ('pending','confirmed','checked-in','completed','cancelled')"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    full_name = Column(String)
    email = Column(String)
    phone = Column(String)
    role = Column(String, nullable=False, default="user")

    __table_args__ = (
        CheckConstraint("role in ('user','admin')", name="user_role_valid"),
    )

class RoomType(Base):
    __tablename__ = "room_types"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # whole dollars per night
    capacity = Column(Integer, nullable=False)  # persons
    size = Column(Integer)  # square meters
    amenities = Column(JSON)
    image_url = Column(String)

    __table_args__ = (
        CheckConstraint("price > 0", name="room_type_price_positive"),
    )

class SpaService(Base):
    __tablename__ = "spa_services"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Integer, nullable=False)
    image_url = Column(String)

class RestaurantMenu(Base):
    __tablename__ = "restaurant_menus"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    image_url = Column(String)

class RoomBooking(Base):
    __tablename__ = "room_bookings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False)
    guest_phone = Column(String)
    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    adults = Column(Integer, nullable=False)
    children = Column(Integer, nullable=False, default=0)
    special_requests = Column(Text)
    total_price = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="room_booking_dates_valid"),
        CheckConstraint(_STATUS_CHECK, name="room_booking_status_valid"),
    )

class SpaBooking(Base):
    __tablename__ = "spa_bookings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    service_id = Column(Integer, ForeignKey("spa_services.id"), nullable=False)
    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False)
    guest_phone = Column(String)
    date = Column(DateTime, nullable=False)
    time = Column(String, nullable=False)  # slot label, e.g. "9:00 AM"
    participants = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text)
    total_price = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="spa_booking_status_valid"),
    )

class RestaurantBooking(Base):
    __tablename__ = "restaurant_bookings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False)
    guest_phone = Column(String)
    date = Column(DateTime, nullable=False)
    time = Column(String, nullable=False)
    party_size = Column(Integer, nullable=False)
    meal_period = Column(String, nullable=False)
    special_requests = Column(Text)
    status = Column(String, nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("meal_period in ('breakfast','lunch','dinner')", name="restaurant_meal_period_valid"),
        CheckConstraint(_STATUS_CHECK, name="restaurant_booking_status_valid"),
    )


BOOKING_MODELS = {
    BookingKind.ROOM: RoomBooking,
    BookingKind.SPA: SpaBooking,
    BookingKind.RESTAURANT: RestaurantBooking,
}
