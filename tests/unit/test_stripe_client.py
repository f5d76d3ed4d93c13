"""Stripe payment intent client against a mocked transport."""

from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest
from services.payments_service.stripe_client import (
    PaymentGatewayError,
    StripeClient,
    to_minor_units,
)


@pytest.mark.unit
def test_minor_units():
    assert to_minor_units(Decimal("19.99")) == 1999
    assert to_minor_units(Decimal("100")) == 10000


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_payment_intent_posts_form():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "pi_123", "client_secret": "pi_123_secret"})

    client = StripeClient(
        secret_key="sk_test_abc",
        base_url="https://stripe.test/v1",
        currency="usd",
        transport=httpx.MockTransport(handler),
    )

    intent = await client.create_payment_intent(Decimal("25.50"), "Purchase of Dinks")

    assert intent.id == "pi_123"
    assert intent.client_secret == "pi_123_secret"
    assert intent.amount == Decimal("25.50")
    assert seen["url"] == "https://stripe.test/v1/payment_intents"
    assert seen["auth"] == "Bearer sk_test_abc"
    assert seen["form"]["amount"] == ["2550"]
    assert seen["form"]["currency"] == ["usd"]
    assert seen["form"]["description"] == ["Purchase of Dinks"]
    assert seen["form"]["automatic_payment_methods[enabled]"] == ["true"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_stripe_error_is_raised_as_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": {"message": "Your card was declined."}})

    client = StripeClient(
        secret_key="sk_test_abc",
        base_url="https://stripe.test/v1",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(PaymentGatewayError, match="declined") as exc_info:
        await client.create_payment_intent(Decimal("10"), "Purchase of X")

    assert exc_info.value.status_code == 402


@pytest.mark.asyncio
@pytest.mark.unit
async def test_missing_secret_key_fails_fast():
    client = StripeClient(secret_key="", base_url="https://stripe.test/v1")
    client.secret_key = ""

    with pytest.raises(PaymentGatewayError, match="not configured"):
        await client.create_payment_intent(Decimal("10"), "Purchase of X")
