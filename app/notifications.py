"""
Booking confirmation emails, sent through the SendGrid v3 HTTP API.

Without a valid API key the notifier only logs what it would have sent.
Delivery problems raise NotificationError; callers decide whether to swallow it.
"""
import logging
from datetime import datetime

import requests

from app.errors import NotificationError

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

_BOX_STYLE = (
    "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; "
    "border: 1px solid #e0e0e0; border-radius: 5px;"
)


def format_long_date(value: datetime) -> str:
    # e.g. "Friday, January 10, 2025"
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


class EmailNotifier:

    def __init__(self, api_key: str | None, sender: str, timeout: float = 10):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        if not self.enabled:
            logger.warning("SENDGRID_API_KEY is not set or is invalid. Email confirmations will be disabled.")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and self.api_key.startswith("SG.")

    def send_email(self, to: str, subject: str, text: str = "", html: str = "") -> bool:
        if not self.enabled:
            logger.info("Email would have been sent to=%s subject=%r", to, subject)
            return False

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text or " "},
                {"type": "text/html", "value": html or text or " "},
            ],
        }
        try:
            r = requests.post(
                SENDGRID_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"SendGrid request failed: {e}") from e
        if r.status_code >= 300:
            raise NotificationError(f"SendGrid responded {r.status_code}: {r.text}")
        logger.info("Email sent to %s", to)
        return True

    def _send_confirmation(self, to: str, name: str, title: str, details: list[tuple[str, str]],
                           closing: str) -> bool:
        lines = "\n".join(f"    - {label}: {value}" for label, value in details)
        text = (
            f"Dear {name},\n\n"
            "Thank you for booking with us. Your reservation has been confirmed.\n\n"
            f"Booking Details:\n{lines}\n\n"
            f"{closing}\n\n"
            "Best regards,\nThe Luxury Resort Team\n"
        )
        rows = "".join(
            f'<p style="margin: 5px 0;"><strong>{label}:</strong> {value}</p>' for label, value in details
        )
        html = (
            f'<div style="{_BOX_STYLE}">'
            f'<h2 style="color: #4a5568; border-bottom: 1px solid #e0e0e0; padding-bottom: 10px;">{title}</h2>'
            f'<p style="color: #4a5568;">Dear {name},</p>'
            '<p style="color: #4a5568;">Thank you for booking with us. Your reservation has been confirmed.</p>'
            '<div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0;">'
            f'<h3 style="color: #4a5568; margin-top: 0;">Booking Details</h3>{rows}</div>'
            f'<p style="color: #4a5568;">{closing}</p>'
            '<p style="color: #4a5568;">Best regards,<br>The Luxury Resort Team</p>'
            "</div>"
        )
        return self.send_email(to, f"Your {title}", text=text, html=html)

    def send_room_booking_confirmation(self, guest_email: str, guest_name: str, room_name: str,
                                       check_in: datetime, check_out: datetime, total_price: int) -> bool:
        return self._send_confirmation(
            guest_email, guest_name, "Room Booking Confirmation",
            [
                ("Room", room_name),
                ("Check-in", format_long_date(check_in)),
                ("Check-out", format_long_date(check_out)),
                ("Total Price", f"${total_price}"),
            ],
            "If you have any questions about your reservation, please contact our front desk. "
            "We look forward to welcoming you!",
        )

    def send_spa_booking_confirmation(self, guest_email: str, guest_name: str, service_name: str,
                                      date: datetime, time: str, total_price: int) -> bool:
        return self._send_confirmation(
            guest_email, guest_name, "Spa Booking Confirmation",
            [
                ("Service", service_name),
                ("Date", format_long_date(date)),
                ("Time", time),
                ("Total Price", f"${total_price}"),
            ],
            "If you need to reschedule or have any questions, please contact our spa reception. "
            "We look forward to providing you with a relaxing experience!",
        )

    def send_restaurant_booking_confirmation(self, guest_email: str, guest_name: str, date: datetime,
                                             time: str, party_size: int, meal_period: str) -> bool:
        return self._send_confirmation(
            guest_email, guest_name, "Restaurant Reservation Confirmation",
            [
                ("Date", format_long_date(date)),
                ("Time", time),
                ("Party Size", f"{party_size} {'person' if party_size == 1 else 'people'}"),
                ("Meal", meal_period.capitalize()),
            ],
            "If you need to change your reservation or have any questions, please contact our restaurant. "
            "We look forward to serving you!",
        )
