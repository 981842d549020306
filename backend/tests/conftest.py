"""
Shared fixtures: per-test SQLite order store, settings and API client.
"""
import os

# Required settings must exist before order_sync is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NG_GATEWAY_URL", "https://api-gateway.sandbox.test")
os.environ.setdefault("NG_OUTLET", "outlet-123")
os.environ.setdefault("NG_KEY", "test-api-key")
os.environ.setdefault("NG_WEBHOOK_SECRET", "test-webhook-secret")
os.environ.setdefault("NG_MODE", "production")

from typing import Callable  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import order_sync.models  # noqa: E402,F401
from order_sync.core.config import Settings, get_settings  # noqa: E402
from order_sync.core.database import Base, get_db_session  # noqa: E402
from order_sync.main import app  # noqa: E402
from order_sync.routers.dependencies import get_gateway_client  # noqa: E402
from order_sync.services.ngenius_client import NGeniusClient  # noqa: E402

GATEWAY_ORDERS_PATH = "/transactions/outlets/outlet-123/orders"
GATEWAY_TOKEN_PATH = "/identity/auth/access-token"


@pytest.fixture
def test_settings() -> Settings:
    """Production-mode settings shared by all components under test."""
    return get_settings().model_copy(
        update={"mode": "production", "reconcile_permissive": False}
    )


@pytest.fixture
def sandbox_settings(test_settings: Settings) -> Settings:
    return test_settings.model_copy(update={"mode": "sandbox"})


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent sessions see each other's commits."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def gateway_ok(request: httpx.Request) -> httpx.Response:
    """Happy-path N-Genius responses."""
    if request.url.path == GATEWAY_TOKEN_PATH:
        return httpx.Response(200, json={"access_token": "gw-token"})
    if request.url.path == GATEWAY_ORDERS_PATH:
        return httpx.Response(
            201,
            json={
                "reference": "GW-REF-1",
                "_links": {"payment": {"href": "https://pay.sandbox.test/GW-REF-1"}},
            },
        )
    return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def use_gateway(test_settings: Settings) -> Callable:
    """Route the app's gateway client through a mock transport handler."""

    def install(handler: Callable[[httpx.Request], httpx.Response] = gateway_ok) -> None:
        app.dependency_overrides[get_gateway_client] = lambda: NGeniusClient(
            test_settings,
            transport=httpx.MockTransport(handler),
        )

    return install


@pytest.fixture
def use_settings() -> Callable:
    """Swap the settings seen by the app for the rest of the test."""

    def install(settings: Settings) -> None:
        app.dependency_overrides[get_settings] = lambda: settings

    return install


@pytest.fixture
async def async_client(session_factory, test_settings: Settings, use_gateway):
    """API client bound to the test order store."""

    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_settings] = lambda: test_settings
    use_gateway()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_checkout_data() -> dict:
    """Sample checkout request body."""
    return {
        "orderId": "O1",
        "userId": "U1",
        "amount": 1000,
        "items": [{"sku": "TSHIRT-M", "quantity": 2, "price": 400}],
        "shippingCost": 200,
        "shippingDetails": {"city": "Dakar", "phone": "+221700000000"},
        "promoCode": "",
        "paymentMethod": "card",
    }
