"""
Stripe PaymentIntent creation over the Stripe REST API.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The gateway could not be reached or refused the request."""


class PaymentNotConfiguredError(PaymentGatewayError):
    """No Stripe secret key is configured."""


def to_minor_units(price: Union[float, str, Decimal, None]) -> int:
    """Convert a major-unit price to an integer count of cents.

    Raises ValueError for missing, non-numeric or non-positive prices.
    """
    if price is None or price == "":
        raise ValueError("Price is required")

    try:
        amount = Decimal(str(price))
    except InvalidOperation:
        raise ValueError(f"Price is not a number: {price!r}")

    if not amount.is_finite() or amount <= 0:
        raise ValueError("Price must be greater than zero")

    minor = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minor < 1:
        raise ValueError("Price must be at least one cent")

    return minor


class StripePaymentGateway:
    def __init__(
        self,
        secret_key: Optional[str],
        currency: str = "usd",
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.currency = currency
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def create_payment_intent(self, amount: int) -> dict:
        """Create a PaymentIntent for ``amount`` minor units."""
        if not self.secret_key:
            raise PaymentNotConfiguredError("Payment gateway not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/payment_intents",
                    auth=(self.secret_key, ""),
                    data={
                        "amount": amount,
                        "currency": self.currency,
                        "payment_method_types[]": "card",
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Stripe request failed: {e}")
            raise PaymentGatewayError("Payment gateway unavailable") from e

        if response.status_code != 200:
            logger.error(f"Stripe rejected payment intent ({response.status_code}): {response.text}")
            raise PaymentGatewayError("Payment gateway rejected the request")

        try:
            intent = response.json()
        except ValueError as e:
            raise PaymentGatewayError("Payment gateway sent an unreadable response") from e

        if not isinstance(intent, dict) or not intent.get("client_secret"):
            logger.error(f"Stripe payment intent without client_secret: {response.text}")
            raise PaymentGatewayError("Payment gateway sent an incomplete response")

        return intent


def get_payment_gateway() -> StripePaymentGateway:
    """Payment gateway dependency."""
    return StripePaymentGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        currency=settings.PAYMENT_CURRENCY,
        base_url=settings.STRIPE_API_BASE,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
