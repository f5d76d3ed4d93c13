"""
Stripe API client for payment intents.

Talks to the REST API directly with httpx; amounts go over the wire in the
smallest currency unit (cents).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx
from libs.common.config import get_settings
from libs.common.errors import ExternalServiceError
from libs.common.logging import get_logger
from services.payments_service.gateway import PaymentIntent

logger = get_logger(__name__)


class PaymentGatewayError(ExternalServiceError):
    """The payment gateway rejected a request or could not be reached."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, response_data: Optional[dict] = None
    ):
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeClient:
    """Async client for the Stripe PaymentIntents API."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        currency: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self.base_url = (base_url or settings.STRIPE_API_BASE).rstrip("/")
        self.currency = currency or settings.PAYMENT_CURRENCY
        self._transport = transport
        self._headers = {"Authorization": f"Bearer {self.secret_key}"}

    async def _request(self, method: str, endpoint: str, data: dict) -> dict:
        """Make an async form-encoded request to the Stripe API."""
        if not self.secret_key:
            raise PaymentGatewayError("STRIPE_SECRET_KEY is not configured")

        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.request(
                    method=method, url=url, headers=self._headers, data=data
                )
        except httpx.HTTPError as exc:
            logger.error("Stripe request to %s failed: %s", endpoint, exc)
            raise PaymentGatewayError("Payment gateway unavailable") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.is_success:
            error = body.get("error") or {}
            logger.error("Stripe API error: %s - %s", response.status_code, error)
            raise PaymentGatewayError(
                error.get("message", "Unknown Stripe error"),
                status_code=response.status_code,
                response_data=body,
            )
        return body

    async def create_payment_intent(
        self, amount: Decimal, description: str
    ) -> PaymentIntent:
        """
        Create a payment intent the client confirms with ``client_secret``.

        Args:
            amount: Amount in major units, e.g. Decimal("19.99")
            description: Shown on the customer's statement and dashboard
        """
        data = await self._request(
            "POST",
            "/payment_intents",
            data={
                "amount": to_minor_units(amount),
                "currency": self.currency,
                "description": description,
                "automatic_payment_methods[enabled]": "true",
            },
        )
        logger.info("Created payment intent %s for %s %s", data["id"], amount, self.currency)
        return PaymentIntent(
            id=data["id"],
            client_secret=data["client_secret"],
            amount=amount,
            currency=self.currency,
        )
