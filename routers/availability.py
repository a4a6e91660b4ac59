from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.availability import as_utc_naive
from app.dependencies import get_booking_service
from app.errors import ValidationError
from app.models import MealPeriod
from app.schemas import AvailabilityOut
from app.services import BookingService

router = APIRouter()

@router.get("/room-availability", response_model=AvailabilityOut)
def room_availability(
    room_type_id: int = Query(..., alias="roomTypeId"),
    check_in_date: datetime = Query(..., alias="checkInDate"),
    check_out_date: datetime = Query(..., alias="checkOutDate"),
    service: BookingService = Depends(get_booking_service),
):
    check_in, check_out = as_utc_naive(check_in_date), as_utc_naive(check_out_date)
    if check_out <= check_in:
        raise ValidationError.for_field("checkOutDate", "checkOutDate must be after checkInDate")
    return {"available": service.check_room_availability(room_type_id, check_in, check_out)}

@router.get("/spa-availability", response_model=AvailabilityOut)
def spa_availability(
    service_id: int = Query(..., alias="serviceId"),
    date: datetime = Query(...),
    time: str = Query(..., min_length=1),
    service: BookingService = Depends(get_booking_service),
):
    return {"available": service.check_spa_availability(service_id, as_utc_naive(date), time)}

@router.get("/restaurant-availability", response_model=AvailabilityOut)
def restaurant_availability(
    date: datetime = Query(...),
    time: str = Query(..., min_length=1),
    party_size: int = Query(..., alias="partySize", ge=1),
    meal_period: MealPeriod = Query(..., alias="mealPeriod"),
    service: BookingService = Depends(get_booking_service),
):
    available = service.check_restaurant_availability(as_utc_naive(date), time, party_size, meal_period.value)
    return {"available": available}
