"""Payment gateway contract.

The marketplace only ever asks the gateway for a payment intent; the client
completes payment out-of-band with the returned secret.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: Decimal
    currency: str


class PaymentGateway(Protocol):
    async def create_payment_intent(
        self, amount: Decimal, description: str
    ) -> PaymentIntent: ...


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency returning the configured gateway."""
    from services.payments_service.stripe_client import StripeClient

    return StripeClient()
