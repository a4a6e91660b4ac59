from fastapi import APIRouter, Depends

from app.dependencies import get_booking_service, get_identity
from app.identity import Identity
from app.models import BookingKind
from app.schemas import (
    RoomBookingCreate, SpaBookingCreate, RestaurantBookingCreate,
    RoomBookingOut, SpaBookingOut, RestaurantBookingOut,
)
from app.services import BookingService

router = APIRouter()

@router.post("/room-bookings", status_code=201, response_model=RoomBookingOut)
def create_room_booking(
    body: RoomBookingCreate,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    """
    Book a room type for [checkInDate, checkOutDate).
      - 400: invalid payload, or totalPrice not matching nightly price x nights
      - 404: unknown roomTypeId
      - 409: all rooms of that type are taken for some night of the stay
    Bookings made with an X-User-Id are attached to that user; otherwise they are guest bookings.
    """
    return service.create_room_booking(body, identity)

@router.post("/spa-bookings", status_code=201, response_model=SpaBookingOut)
def create_spa_booking(
    body: SpaBookingCreate,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.create_spa_booking(body, identity)

@router.post("/restaurant-bookings", status_code=201, response_model=RestaurantBookingOut)
def create_restaurant_booking(
    body: RestaurantBookingCreate,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.create_restaurant_booking(body, identity)

@router.get("/room-bookings/{booking_id}", response_model=RoomBookingOut)
def get_room_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(BookingKind.ROOM, booking_id, identity)

@router.get("/spa-bookings/{booking_id}", response_model=SpaBookingOut)
def get_spa_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(BookingKind.SPA, booking_id, identity)

@router.get("/restaurant-bookings/{booking_id}", response_model=RestaurantBookingOut)
def get_restaurant_booking(
    booking_id: int,
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(BookingKind.RESTAURANT, booking_id, identity)
