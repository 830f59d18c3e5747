"""
Booking confirmation emails, sent through the Mailgun HTTP API.

Delivery is best effort: callers schedule ``send_booking_confirmation`` as a
background task and a failure only ends up in the log.
"""
import logging
from typing import Optional

import httpx

from ..core.config import settings
from ..schemas.booking import BookingResponse

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when an email could not be handed to the provider."""


class MailgunMailer:
    def __init__(
        self,
        api_key: Optional[str],
        domain: Optional[str],
        sender: str,
        base_url: str = "https://api.mailgun.net/v3",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.domain = domain
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.domain)

    async def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> dict:
        if not self.configured:
            raise NotificationError("Email sender not configured")

        data = {"from": self.sender, "to": to, "subject": subject, "text": text}
        if html:
            data["html"] = html

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/{self.domain}/messages",
                    auth=("api", self.api_key),
                    data=data,
                )
        except httpx.HTTPError as e:
            raise NotificationError(f"Mailgun request failed: {e}") from e

        if response.status_code != 200:
            raise NotificationError(
                f"Mailgun rejected message ({response.status_code}): {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise NotificationError(f"Mailgun sent an unreadable response: {response.text}") from e


def build_booking_email(booking: BookingResponse) -> dict:
    """Subject and bodies of the confirmation sent after a booking."""
    reminder = (
        f"You have booked an appointment for {booking.service}. "
        f"Your time slot is {booking.time_slot} on {booking.booking_date}. "
        f"Please make sure you attend the appointment."
    )
    return {
        "subject": (
            f"Booking an appointment for {booking.service} at {booking.time_slot} "
            f"on {booking.booking_date}."
        ),
        "text": f"Hello, {reminder}",
        "html": f"<h2>Hello</h2>\n<p>{reminder}</p>",
    }


async def send_booking_confirmation(mailer: MailgunMailer, booking: BookingResponse) -> None:
    message = build_booking_email(booking)
    try:
        result = await mailer.send(to=booking.email, **message)
    except NotificationError as e:
        logger.error(f"Booking confirmation for booking {booking.id} not sent: {e}")
        return

    logger.info(f"Booking confirmation queued for {booking.email}: {result.get('id')}")


def get_mailer() -> MailgunMailer:
    """Mailer dependency."""
    return MailgunMailer(
        api_key=settings.MAILGUN_API_KEY,
        domain=settings.MAILGUN_DOMAIN,
        sender=settings.EMAIL_FROM,
        base_url=settings.MAILGUN_API_BASE,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
