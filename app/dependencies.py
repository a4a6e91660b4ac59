from functools import lru_cache

from fastapi import BackgroundTasks, Depends, Header
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.db import get_db
from app.identity import Identity, resolve_identity
from app.notifications import EmailNotifier
from app.services import BookingService
from app.store import BookingStore, SqlStore


def get_store(db: Session = Depends(get_db)) -> BookingStore:
    return SqlStore(db)


@lru_cache
def get_notifier() -> EmailNotifier:
    settings = get_settings()
    return EmailNotifier(settings.sendgrid_api_key, settings.mail_from)


def get_identity(
    x_user_id: str | None = Header(default=None),
    store: BookingStore = Depends(get_store),
) -> Identity:
    """
    Authentication is handled upstream; this trusts the X-User-Id header it
    forwards. Override this dependency to plug in a real session or token check.
    """
    return resolve_identity(store, x_user_id)


def get_booking_service(
    background_tasks: BackgroundTasks,
    store: BookingStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    notifier: EmailNotifier = Depends(get_notifier),
) -> BookingService:
    # Emails go out after the response is sent.
    return BookingService(store, settings, notifier, dispatch=background_tasks.add_task)
