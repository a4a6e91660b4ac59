from fastapi import APIRouter, Depends

from app.dependencies import get_store
from app.errors import NotFoundError
from app.schemas import RoomTypeOut, SpaServiceOut, RestaurantMenuOut
from app.store import BookingStore

router = APIRouter()

@router.get("/room-types", response_model=list[RoomTypeOut])
def list_room_types(store: BookingStore = Depends(get_store)):
    return store.list_room_types()

@router.get("/room-types/{room_type_id}", response_model=RoomTypeOut)
def get_room_type(room_type_id: int, store: BookingStore = Depends(get_store)):
    room_type = store.get_room_type(room_type_id)
    if room_type is None:
        raise NotFoundError("Room type not found")
    return room_type

@router.get("/spa-services", response_model=list[SpaServiceOut])
def list_spa_services(store: BookingStore = Depends(get_store)):
    return store.list_spa_services()

@router.get("/spa-services/{service_id}", response_model=SpaServiceOut)
def get_spa_service(service_id: int, store: BookingStore = Depends(get_store)):
    service = store.get_spa_service(service_id)
    if service is None:
        raise NotFoundError("Spa service not found")
    return service

@router.get("/restaurant-menus", response_model=list[RestaurantMenuOut])
def list_restaurant_menus(store: BookingStore = Depends(get_store)):
    return store.list_restaurant_menus()
