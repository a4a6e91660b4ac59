from fastapi import APIRouter, Depends

from app.dependencies import get_booking_service, get_identity
from app.identity import Identity
from app.models import BookingKind
from app.schemas import RoomBookingOut, SpaBookingOut, RestaurantBookingOut
from app.services import BookingService

router = APIRouter()

# Newest activity first: rooms by check-in date, spa and restaurant by date.

@router.get("/room-bookings", response_model=list[RoomBookingOut])
def my_room_bookings(
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.my_bookings(BookingKind.ROOM, identity)

@router.get("/spa-bookings", response_model=list[SpaBookingOut])
def my_spa_bookings(
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.my_bookings(BookingKind.SPA, identity)

@router.get("/restaurant-bookings", response_model=list[RestaurantBookingOut])
def my_restaurant_bookings(
    identity: Identity = Depends(get_identity),
    service: BookingService = Depends(get_booking_service),
):
    return service.my_bookings(BookingKind.RESTAURANT, identity)
