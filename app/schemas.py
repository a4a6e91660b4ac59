from datetime import datetime
from typing import Annotated, Literal, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.availability import as_utc_naive
from app.models import BookingStatus, MealPeriod


def _valid_email(v: str) -> str:
    # Checked, not normalized: the address is kept exactly as the guest typed it.
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return v


def _utc_iso(ts: datetime) -> str:
    return as_utc_naive(ts).isoformat() + "Z"


GuestEmail = Annotated[str, AfterValidator(_valid_email)]
# Stored naive in UTC; sent with an explicit Z so clients don't read local time.
UtcDatetime = Annotated[datetime, PlainSerializer(_utc_iso, return_type=str, when_used="json")]


class Schema(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Requests ---

class GuestDetails(Schema):
    guest_name: str = Field(..., min_length=1)
    guest_email: GuestEmail
    guest_phone: str | None = None
    special_requests: str | None = None


class RoomBookingCreate(GuestDetails):
    room_type_id: int = Field(..., gt=0)
    check_in_date: datetime
    check_out_date: datetime
    adults: int = Field(..., ge=1)
    children: int = Field(0, ge=0)
    total_price: int | None = Field(None, gt=0)

    @field_validator("check_in_date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc_naive(v)

    @field_validator("check_out_date")
    @classmethod
    def _after_check_in(cls, v: datetime, info: ValidationInfo) -> datetime:
        v = as_utc_naive(v)
        check_in = info.data.get("check_in_date")
        if check_in is not None and v <= check_in:
            raise ValueError("checkOutDate must be after checkInDate")
        return v


class SpaBookingCreate(GuestDetails):
    service_id: int = Field(..., gt=0)
    date: datetime
    time: str = Field(..., min_length=1)
    participants: int = Field(1, ge=1)
    total_price: int | None = Field(None, gt=0)

    @field_validator("date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc_naive(v)


class RestaurantBookingCreate(GuestDetails):
    date: datetime
    time: str = Field(..., min_length=1)
    party_size: int = Field(..., ge=1)
    meal_period: MealPeriod

    @field_validator("date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc_naive(v)


class StatusUpdate(Schema):
    status: BookingStatus


# --- Responses ---

class UserOut(Schema):
    id: int
    username: str
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str


class RoomTypeOut(Schema):
    id: int
    name: str
    description: str
    price: int
    capacity: int
    size: int | None = None
    amenities: list[str] | None = None
    image_url: str | None = None


class SpaServiceOut(Schema):
    id: int
    name: str
    description: str
    duration: int
    price: int
    image_url: str | None = None


class RestaurantMenuOut(Schema):
    id: int
    name: str
    description: str
    price: int
    image_url: str | None = None


class BookingOut(Schema):
    id: int
    user_id: int | None = None
    guest_name: str
    guest_email: str
    guest_phone: str | None = None
    special_requests: str | None = None
    status: BookingStatus
    created_at: UtcDatetime


class RoomBookingOut(BookingOut):
    room_type_id: int
    check_in_date: UtcDatetime
    check_out_date: UtcDatetime
    adults: int
    children: int
    total_price: int


class SpaBookingOut(BookingOut):
    service_id: int
    date: UtcDatetime
    time: str
    participants: int
    total_price: int


class RestaurantBookingOut(BookingOut):
    date: UtcDatetime
    time: str
    party_size: int
    meal_period: MealPeriod


class AvailabilityOut(Schema):
    available: bool


# Admin dashboard rows: one list, tagged by bookingType.

class AdminBookingBase(Schema):
    id: int
    user_id: int | None = None
    created_at: UtcDatetime
    status: BookingStatus
    user_full_name: str | None = None
    user_email: str | None = None
    user_phone: str | None = None


class AdminRoomBooking(AdminBookingBase):
    booking_type: Literal["room"] = "room"
    room_type_id: int
    room_type_name: str | None = None
    check_in_date: UtcDatetime
    check_out_date: UtcDatetime
    adults: int
    children: int
    total_price: int


class AdminSpaBooking(AdminBookingBase):
    booking_type: Literal["spa"] = "spa"
    service_id: int
    service_name: str | None = None
    appointment_date: UtcDatetime
    appointment_time: str
    participants: int
    price: int


class AdminRestaurantBooking(AdminBookingBase):
    booking_type: Literal["restaurant"] = "restaurant"
    reservation_date: UtcDatetime
    reservation_time: str
    party_size: int
    meal_period: MealPeriod


AdminBooking = Annotated[
    Union[AdminRoomBooking, AdminSpaBooking, AdminRestaurantBooking],
    Field(discriminator="booking_type"),
]
