import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from routers import admin, availability, bookings, catalog, my_bookings
from app.config import get_settings
from app.db import init_db
from app.errors import BookingError

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Resort Booking API", version="0.1.0")

app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(bookings.router, prefix="/api", tags=["bookings"])
app.include_router(availability.router, prefix="/api", tags=["availability"])
app.include_router(my_bookings.router, prefix="/api/my", tags=["my bookings"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

_LOCATION_PREFIXES = ("body", "query", "path", "header")

@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message, "errors": exc.errors})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # 400 with every violated field, named as on the wire.
    errors = []
    for e in exc.errors():
        loc = [str(part) for part in e["loc"] if part not in _LOCATION_PREFIXES]
        errors.append({"field": ".".join(loc) or "body", "message": e["msg"]})
    message = "Validation error: " + "; ".join(f'{e["message"]} at "{e["field"]}"' for e in errors)
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})

@app.on_event("startup")
def on_startup():
    logger.warning("X-User-Id is trusted as sent; run behind a proxy that authenticates and sets it")
    if os.getenv("SKIP_DB_INIT") == "1":
        return
    init_db()

@app.get("/")
def root():
    return {"ok": True, "service": "resort-booking-api"}
