"""Shared fixtures for billing tests.

Provides a file-backed SQLite store, a fake payment provider, a seeded
tenant, bearer tokens and an async httpx client bound to the app.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from billing.core.config import PaymentSettings, SecuritySettings, Settings, get_settings
from billing.core.container import ApplicationContainer
from billing.core.crypto import compute_payment_signature
from billing.core.security import create_access_token
from billing.infrastructure.database import build_engine, build_session_factory, init_db
from billing.interfaces.http.deps import get_db_session
from billing.main import create_app
from billing.modules.balances import BalanceService
from billing.modules.purchases import PaymentProviderError, PriceTable, ProviderOrder
from billing.modules.tenants import TenantService

SIGNING_SECRET = "test-signing-secret"
OWNER_ID = "user-owner"
ADMIN_ID = "user-admin"
MEMBER_ID = "user-member"
OUTSIDER_ID = "user-outsider"


class FakePaymentProvider:
    """In-memory stand-in for the provider Orders API."""

    public_key = "rzp_test_fake"

    def __init__(self, secret: str = SIGNING_SECRET) -> None:
        self.secret = secret
        self.orders: list[ProviderOrder] = []
        self.notes: list[dict[str, str]] = []
        self.fail_next = False
        self.closed = False
        self._ids = itertools.count(1)

    async def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> ProviderOrder:
        if self.fail_next:
            self.fail_next = False
            raise PaymentProviderError("provider unavailable")
        order = ProviderOrder(id=f"order_{next(self._ids):06d}", amount=amount, currency=currency, receipt=receipt)
        self.orders.append(order)
        self.notes.append(dict(notes))
        return order

    def pay(self, order_id: str, payment_id: str | None = None) -> tuple[str, str]:
        """Simulate a checkout: return ``(payment_id, signature)`` for an order."""
        payment_id = payment_id or f"pay_{order_id.split('_')[-1]}"
        return payment_id, compute_payment_signature(order_id, payment_id, self.secret)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        environment="test",
        security=SecuritySettings(secret_key="test-secret-key-for-billing"),
        payments=PaymentSettings(
            provider_key_id="rzp_test_fake",
            provider_key_secret=SecretStr("provider-secret"),
            signing_secret=SecretStr(SIGNING_SECRET),
        ),
    )


@pytest.fixture()
def prices(test_settings: Settings) -> PriceTable:
    return PriceTable.from_settings(test_settings.pricing)


@pytest.fixture()
def provider() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest_asyncio.fixture()
async def engine(tmp_path):
    """File-backed SQLite so concurrent sessions use separate connections."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'billing.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture()
async def tenant_id(session_factory) -> str:
    """A tenant with an owner, an admin and a plain member."""
    async with session_factory() as session:
        tenants = TenantService.with_session(session)
        tenant = await tenants.create_tenant("Acme Agency", owner_id=OWNER_ID)
        await tenants.add_member(tenant.id, ADMIN_ID, role="admin")
        await tenants.add_member(tenant.id, MEMBER_ID)
        await BalanceService.with_session(session).ensure_balance(tenant.id)
        await session.commit()
        return tenant.id


def auth_headers(settings: Settings, principal_id: str = OWNER_ID) -> dict[str, str]:
    token = create_access_token(principal_id, settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def app(test_settings: Settings, session_factory, provider: FakePaymentProvider):
    """Application with the test store and fake provider wired in."""
    application = create_app(test_settings)
    application.state.container = ApplicationContainer.build(test_settings, payment_provider=provider)

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _override_session
    application.dependency_overrides[get_settings] = lambda: test_settings
    return application


@pytest_asyncio.fixture()
async def client(app) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
