import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./resort.db"
    room_capacity_per_type: int = 3
    spa_sessions_per_slot: int = 3
    restaurant_seats_per_slot: int = 50
    spa_service_fee_rate: float = 0.10
    sendgrid_api_key: str | None = None
    mail_from: str = "reservations@luxuryresort.com"
    log_level: str = "INFO"
    seed_admin: bool = False


@lru_cache
def get_settings() -> Settings:
    """Read settings from the environment once per process."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.database_url),
        room_capacity_per_type=int(os.getenv("ROOM_CAPACITY_PER_TYPE", Settings.room_capacity_per_type)),
        spa_sessions_per_slot=int(os.getenv("SPA_SESSIONS_PER_SLOT", Settings.spa_sessions_per_slot)),
        restaurant_seats_per_slot=int(os.getenv("RESTAURANT_SEATS_PER_SLOT", Settings.restaurant_seats_per_slot)),
        spa_service_fee_rate=float(os.getenv("SPA_SERVICE_FEE_RATE", Settings.spa_service_fee_rate)),
        sendgrid_api_key=os.getenv("SENDGRID_API_KEY"),
        mail_from=os.getenv("MAIL_FROM", Settings.mail_from),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        seed_admin=os.getenv("SEED_ADMIN") == "1",
    )
