from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.events import get_event_bus
from libs.db.base import Base
from libs.db.session import get_async_db
from services.gateway_service.app.main import app
from services.media_service.storage import LocalAssetStore, get_asset_store
from services.payments_service.gateway import PaymentIntent, get_payment_gateway

# Import all models so metadata includes every table
from services.materials_service import models as _material_models  # noqa: F401
from services.media_service import models as _media_models  # noqa: F401
from services.members_service import models as _member_models  # noqa: F401
from services.reviews_service import models as _review_models  # noqa: F401
from services.sessions_service import models as _session_models  # noqa: F401


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class FakePaymentGateway:
    """Records payment intent requests instead of calling Stripe."""

    def __init__(self):
        self.calls: list[tuple[Decimal, str]] = []

    async def create_payment_intent(self, amount: Decimal, description: str) -> PaymentIntent:
        self.calls.append((amount, description))
        number = len(self.calls)
        return PaymentIntent(
            id=f"pi_test_{number}",
            client_secret=f"pi_test_{number}_secret",
            amount=amount,
            currency="usd",
        )


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def asset_store(tmp_path) -> LocalAssetStore:
    return LocalAssetStore(str(tmp_path / "uploads"), "/uploads")


@pytest.fixture(autouse=True)
def event_bus():
    """Each test starts with a bus that has no subscribers."""
    bus = get_event_bus()
    bus.clear()
    yield bus
    bus.clear()


@pytest.fixture
def recorded_events(event_bus):
    events = []

    async def _record(event):
        events.append(event)

    event_bus.subscribe("*", _record)
    return events


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    db_session, payment_gateway, asset_store
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app with DB, gateway and storage overridden."""
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_asset_store] = lambda: asset_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
