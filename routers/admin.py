from typing import Union

from fastapi import APIRouter, Depends

from app.dependencies import get_booking_service, get_identity
from app.identity import Identity
from app.models import BookingKind
from app.schemas import (
    AdminBooking, StatusUpdate, UserOut,
    RoomBookingOut, SpaBookingOut, RestaurantBookingOut,
)
from app.services import BookingService

router = APIRouter()

@router.get("/users", response_model=list[UserOut])
def list_users(
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.admin_users(identity)

@router.get("/bookings", response_model=list[AdminBooking])
def list_bookings(
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    """
    Every room, spa and restaurant booking in one list, newest first.
    Each row carries bookingType ("room" | "spa" | "restaurant") plus the
    kind-specific fields. userFullName/userEmail/userPhone come from the
    owning user when there is one, else from the guest details.
    """
    return service.admin_bookings(identity)

@router.patch(
    "/{kind}-bookings/{booking_id}/status",
    response_model=Union[RoomBookingOut, SpaBookingOut, RestaurantBookingOut],
)
def update_booking_status(
    kind: BookingKind,
    booking_id: int,
    body: StatusUpdate,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.update_status(kind, booking_id, body.status, identity)
