"""
Booking orchestration: catalog lookup, price, availability, conditional
insert, then a confirmation email handed to `dispatch` so it runs after the
response has gone out.
"""
import logging
import math
from typing import Callable

from app import availability, schemas
from app.availability import Availability
from app.config import Settings
from app.errors import ConflictError, NotFoundError, NotificationError, ValidationError, AuthorizationError
from app.identity import Identity, ensure_admin, ensure_authenticated
from app.models import BookingKind, BookingStatus, utcnow
from app.notifications import EmailNotifier
from app.store import BookingStore

logger = logging.getLogger(__name__)


def nights_between(check_in, check_out) -> int:
    # Calendar nights; a same-day stay is billed as one night.
    return max(1, (check_out.date() - check_in.date()).days)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def room_total(nightly_price: int, check_in, check_out) -> int:
    return nightly_price * nights_between(check_in, check_out)


def spa_total(price: int, participants: int, fee_rate: float) -> int:
    treatment = price * participants
    return treatment + round_half_up(treatment * fee_rate)


def _raise_for(verdict: Availability, not_found: str, unavailable: str) -> None:
    if verdict is Availability.NOT_FOUND:
        raise NotFoundError(not_found)
    if verdict is Availability.UNAVAILABLE:
        raise ConflictError(unavailable)


def _check_total(submitted: int | None, expected: int, *also_accepted: int) -> None:
    if submitted is None or submitted == expected or submitted in also_accepted:
        return
    raise ValidationError.for_field("totalPrice", f"expected {expected}, got {submitted}")


def _run_now(fn, *args):
    fn(*args)


class BookingService:

    def __init__(self, store: BookingStore, settings: Settings, notifier: EmailNotifier,
                 dispatch: Callable | None = None):
        self.store = store
        self.settings = settings
        self.notifier = notifier
        self.dispatch = dispatch or _run_now

    def _notify(self, send: Callable, *args) -> None:
        try:
            send(*args)
        except NotificationError as e:
            logger.warning("Failed to send booking confirmation email: %s", e)
        except Exception:
            logger.exception("Unexpected error while sending booking confirmation email")

    # --- creation ---

    def create_room_booking(self, payload: schemas.RoomBookingCreate, identity: Identity):
        room_type = self.store.get_room_type(payload.room_type_id)
        if room_type is None:
            raise NotFoundError("Room type not found")
        total = room_total(room_type.price, payload.check_in_date, payload.check_out_date)
        _check_total(payload.total_price, total)

        capacity = self.settings.room_capacity_per_type
        verdict = availability.check_room(
            room_type, self.store.room_bookings_for_type(room_type.id),
            payload.check_in_date, payload.check_out_date, capacity,
        )
        _raise_for(verdict, "Room type not found", "Room not available for the selected dates")

        values = dict(
            user_id=identity.user_id,
            room_type_id=room_type.id,
            guest_name=payload.guest_name,
            guest_email=payload.guest_email,
            guest_phone=payload.guest_phone,
            check_in_date=payload.check_in_date,
            check_out_date=payload.check_out_date,
            adults=payload.adults,
            children=payload.children,
            special_requests=payload.special_requests,
            total_price=total,
            status=BookingStatus.CONFIRMED.value,
            created_at=utcnow(),
        )
        booking = self.store.insert_room_booking(values, capacity)
        if booking is None:
            raise ConflictError("Room not available for the selected dates")
        logger.info("Room booking %s created (room type %s, user %s)", booking.id, room_type.id, identity.user_id)

        self.dispatch(
            self._notify, self.notifier.send_room_booking_confirmation,
            booking.guest_email, booking.guest_name, room_type.name,
            booking.check_in_date, booking.check_out_date, booking.total_price,
        )
        return booking

    def create_spa_booking(self, payload: schemas.SpaBookingCreate, identity: Identity):
        service = self.store.get_spa_service(payload.service_id)
        if service is None:
            raise NotFoundError("Spa service not found")
        total = spa_total(service.price, payload.participants, self.settings.spa_service_fee_rate)
        # Existing clients send the treatment price before the fee; the stored total always includes it.
        _check_total(payload.total_price, total, service.price * payload.participants)

        capacity = self.settings.spa_sessions_per_slot
        verdict = availability.check_spa(
            service, self.store.spa_bookings_for_service(service.id, payload.date),
            payload.date, payload.time, capacity,
        )
        _raise_for(verdict, "Spa service not found", "Spa service not available for the selected date and time")

        values = dict(
            user_id=identity.user_id,
            service_id=service.id,
            guest_name=payload.guest_name,
            guest_email=payload.guest_email,
            guest_phone=payload.guest_phone,
            date=payload.date,
            time=payload.time,
            participants=payload.participants,
            special_requests=payload.special_requests,
            total_price=total,
            status=BookingStatus.CONFIRMED.value,
            created_at=utcnow(),
        )
        booking = self.store.insert_spa_booking(values, capacity)
        if booking is None:
            raise ConflictError("Spa service not available for the selected date and time")
        logger.info("Spa booking %s created (service %s, user %s)", booking.id, service.id, identity.user_id)

        self.dispatch(
            self._notify, self.notifier.send_spa_booking_confirmation,
            booking.guest_email, booking.guest_name, service.name,
            booking.date, booking.time, booking.total_price,
        )
        return booking

    def create_restaurant_booking(self, payload: schemas.RestaurantBookingCreate, identity: Identity):
        seats = self.settings.restaurant_seats_per_slot
        meal_period = payload.meal_period.value
        verdict = availability.check_restaurant(
            self.store.restaurant_bookings_for_day(payload.date),
            payload.date, payload.time, meal_period, payload.party_size, seats,
        )
        if verdict is not Availability.AVAILABLE:
            raise ConflictError("Restaurant not available for the selected date, time, and party size")

        values = dict(
            user_id=identity.user_id,
            guest_name=payload.guest_name,
            guest_email=payload.guest_email,
            guest_phone=payload.guest_phone,
            date=payload.date,
            time=payload.time,
            party_size=payload.party_size,
            meal_period=meal_period,
            special_requests=payload.special_requests,
            status=BookingStatus.CONFIRMED.value,
            created_at=utcnow(),
        )
        booking = self.store.insert_restaurant_booking(values, seats)
        if booking is None:
            raise ConflictError("Restaurant not available for the selected date, time, and party size")
        logger.info("Restaurant booking %s created (%s, user %s)", booking.id, meal_period, identity.user_id)

        self.dispatch(
            self._notify, self.notifier.send_restaurant_booking_confirmation,
            booking.guest_email, booking.guest_name,
            booking.date, booking.time, booking.party_size, booking.meal_period,
        )
        return booking

    # --- availability queries ---

    def check_room_availability(self, room_type_id: int, check_in, check_out) -> bool:
        verdict = availability.check_room(
            self.store.get_room_type(room_type_id), self.store.room_bookings_for_type(room_type_id),
            check_in, check_out, self.settings.room_capacity_per_type,
        )
        if verdict is Availability.NOT_FOUND:
            raise NotFoundError("Room type not found")
        return verdict is Availability.AVAILABLE

    def check_spa_availability(self, service_id: int, date, time: str) -> bool:
        verdict = availability.check_spa(
            self.store.get_spa_service(service_id), self.store.spa_bookings_for_service(service_id, date),
            date, time, self.settings.spa_sessions_per_slot,
        )
        if verdict is Availability.NOT_FOUND:
            raise NotFoundError("Spa service not found")
        return verdict is Availability.AVAILABLE

    def check_restaurant_availability(self, date, time: str, party_size: int, meal_period: str) -> bool:
        verdict = availability.check_restaurant(
            self.store.restaurant_bookings_for_day(date),
            date, time, meal_period, party_size, self.settings.restaurant_seats_per_slot,
        )
        return verdict is Availability.AVAILABLE

    # --- reads ---

    def get_booking(self, kind: BookingKind, booking_id: int, identity: Identity):
        ensure_authenticated(identity)
        booking = self.store.get_booking(kind, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if not identity.is_admin and booking.user_id != identity.user_id:
            raise AuthorizationError("Not allowed to view this booking")
        return booking

    def my_bookings(self, kind: BookingKind, identity: Identity) -> list:
        ensure_authenticated(identity)
        return self.store.list_bookings_by_user(kind, identity.user_id)

    # --- admin ---

    def update_status(self, kind: BookingKind, booking_id: int, status: BookingStatus, identity: Identity):
        """
        Move a booking to any of the five statuses. No transition order is
        enforced: cancelled -> completed is accepted like any other change.
        """
        ensure_admin(identity)
        booking = self.store.update_status(kind, booking_id, BookingStatus(status).value)
        if booking is None:
            raise NotFoundError("Booking not found")
        logger.info("%s booking %s set to %s by user %s", kind.value, booking_id, booking.status, identity.user_id)
        return booking

    def admin_users(self, identity: Identity) -> list:
        ensure_admin(identity)
        return self.store.list_users()

    def admin_bookings(self, identity: Identity) -> list:
        ensure_admin(identity)
        users = {u.id: u for u in self.store.list_users()}
        room_types = {r.id: r for r in self.store.list_room_types()}
        services = {s.id: s for s in self.store.list_spa_services()}

        rows = []
        for b in self.store.list_bookings(BookingKind.ROOM):
            room_type = room_types.get(b.room_type_id)
            rows.append(schemas.AdminRoomBooking(
                **_display_fields(b, users),
                room_type_id=b.room_type_id,
                room_type_name=room_type.name if room_type else None,
                check_in_date=b.check_in_date,
                check_out_date=b.check_out_date,
                adults=b.adults,
                children=b.children or 0,
                total_price=b.total_price,
            ))
        for b in self.store.list_bookings(BookingKind.SPA):
            service = services.get(b.service_id)
            rows.append(schemas.AdminSpaBooking(
                **_display_fields(b, users),
                service_id=b.service_id,
                service_name=service.name if service else None,
                appointment_date=b.date,
                appointment_time=b.time,
                participants=b.participants,
                price=b.total_price,
            ))
        for b in self.store.list_bookings(BookingKind.RESTAURANT):
            rows.append(schemas.AdminRestaurantBooking(
                **_display_fields(b, users),
                reservation_date=b.date,
                reservation_time=b.time,
                party_size=b.party_size,
                meal_period=b.meal_period,
            ))
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows


def _display_fields(booking, users: dict) -> dict:
    # The live user record wins over the guest snapshot, field by field.
    user = users.get(booking.user_id) if booking.user_id is not None else None
    full_name = email = phone = None
    if user is not None:
        full_name = user.full_name or user.username
        email = user.email
        phone = user.phone
    return dict(
        id=booking.id,
        user_id=booking.user_id,
        created_at=booking.created_at,
        status=booking.status,
        user_full_name=full_name or booking.guest_name,
        user_email=email or booking.guest_email,
        user_phone=phone or booking.guest_phone,
    )
