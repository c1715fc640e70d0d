"""Tests for billing/modules/purchases/service.py

Covers:
- Order creation persists a pending intent and asks the provider for the quoted amount
- Invalid tier/quantity never reaches the provider or the store
- Only tenant administrators may create orders
- Provider failures and orphaned provider orders surface as retryable internal errors
- Purchase history and summary are limited to tenant members
"""

from __future__ import annotations

import itertools
import logging
import uuid

import pytest
from sqlalchemy import func, select

from billing.core.exceptions import ForbiddenError, InvalidArgumentError, PaymentInternalError
from billing.db.models import PurchaseIntent as PurchaseIntentModel, TenantBalance
from billing.modules.purchases import PurchaseOrderService, PurchaseStatus, PurchaseTier
from billing.modules.purchases.service import receipt_for

from conftest import ADMIN_ID, MEMBER_ID, OUTSIDER_ID, OWNER_ID


async def _intent_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(PurchaseIntentModel.id)))
        return result.scalar_one()


async def _create_order(session_factory, provider, prices, **kwargs):
    async with session_factory() as session:
        service = PurchaseOrderService.with_session(session, provider=provider, prices=prices)
        return await service.create_order(**kwargs)


class TestReceipt:
    def test_receipt_fits_provider_limit(self) -> None:
        intent_id = str(uuid.uuid4())
        receipt = receipt_for(intent_id)
        assert receipt.startswith("tp_")
        assert len(receipt) <= 40
        assert uuid.UUID(receipt[3:]) == uuid.UUID(intent_id)


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_basic_order(self, session_factory, provider, prices, tenant_id) -> None:
        order = await _create_order(
            session_factory, provider, prices,
            principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=10,
        )

        assert order.amount == 500
        assert order.currency == "INR"
        assert order.provider_public_key == "rzp_test_fake"
        assert len(provider.orders) == 1
        assert provider.orders[0].id == order.provider_order_id
        assert provider.orders[0].receipt == receipt_for(order.intent_id)
        assert provider.notes[0] == {
            "tenantId": tenant_id,
            "tier": "basic",
            "quantity": "10",
            "intentId": order.intent_id,
        }

        async with session_factory() as session:
            model = await session.get(PurchaseIntentModel, order.intent_id)
            assert model is not None
            assert model.status == PurchaseStatus.PENDING.value
            assert model.provider_order_id == order.provider_order_id
            assert model.amount == 500
            assert model.quantity == 10
            assert model.created_by == OWNER_ID
            balance = await session.get(TenantBalance, tenant_id)
            assert balance.standard_tokens == 0
            assert balance.premium_tokens == 0

    @pytest.mark.asyncio
    async def test_premium_order_by_admin(self, session_factory, provider, prices, tenant_id) -> None:
        order = await _create_order(
            session_factory, provider, prices,
            principal_id=ADMIN_ID, tenant_id=tenant_id, tier="premium", quantity=5,
        )
        assert order.amount == 37500

    @pytest.mark.asyncio
    async def test_creates_missing_balance_row(self, session_factory, provider, prices, tenant_id) -> None:
        async with session_factory() as session:
            await session.delete(await session.get(TenantBalance, tenant_id))
            await session.commit()

        await _create_order(
            session_factory, provider, prices,
            principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=1,
        )

        async with session_factory() as session:
            assert await session.get(TenantBalance, tenant_id) is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, 150_000, -3])
    async def test_quantity_out_of_range(self, session_factory, provider, prices, tenant_id, quantity) -> None:
        with pytest.raises(InvalidArgumentError):
            await _create_order(
                session_factory, provider, prices,
                principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=quantity,
            )
        assert provider.orders == []
        assert await _intent_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_unknown_tier(self, session_factory, provider, prices, tenant_id) -> None:
        with pytest.raises(InvalidArgumentError):
            await _create_order(
                session_factory, provider, prices,
                principal_id=OWNER_ID, tenant_id=tenant_id, tier="gold", quantity=1,
            )
        assert provider.orders == []
        assert await _intent_count(session_factory) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("principal_id", [MEMBER_ID, OUTSIDER_ID])
    async def test_non_admin_forbidden(self, session_factory, provider, prices, tenant_id, principal_id) -> None:
        with pytest.raises(ForbiddenError):
            await _create_order(
                session_factory, provider, prices,
                principal_id=principal_id, tenant_id=tenant_id, tier="basic", quantity=1,
            )
        assert provider.orders == []

    @pytest.mark.asyncio
    async def test_provider_failure_persists_nothing(self, session_factory, provider, prices, tenant_id) -> None:
        provider.fail_next = True
        with pytest.raises(PaymentInternalError) as exc_info:
            await _create_order(
                session_factory, provider, prices,
                principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=1,
            )
        assert exc_info.value.retryable is True
        assert await _intent_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_orphaned_provider_order_logged(self, session_factory, provider, prices, tenant_id, caplog) -> None:
        first = await _create_order(
            session_factory, provider, prices,
            principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=1,
        )
        # the provider hands out the same order id again, so the intent insert violates uniqueness
        provider._ids = itertools.count(1)

        with caplog.at_level(logging.ERROR, logger="billing.modules.purchases.service"):
            with pytest.raises(PaymentInternalError) as exc_info:
                await _create_order(
                    session_factory, provider, prices,
                    principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=2,
                )

        assert exc_info.value.retryable is True
        assert await _intent_count(session_factory) == 1
        orphan_logs = [r.getMessage() for r in caplog.records if "Orphaned provider order" in r.getMessage()]
        assert len(orphan_logs) == 1
        assert first.provider_order_id in orphan_logs[0]
        assert provider.orders[-1].receipt in orphan_logs[0]
        assert tenant_id in orphan_logs[0]


class TestPurchaseHistory:
    @pytest.mark.asyncio
    async def test_members_can_list_and_filter(self, session_factory, provider, prices, tenant_id) -> None:
        for tier, quantity in (("basic", 10), ("premium", 2)):
            await _create_order(
                session_factory, provider, prices,
                principal_id=OWNER_ID, tenant_id=tenant_id, tier=tier, quantity=quantity,
            )

        async with session_factory() as session:
            service = PurchaseOrderService.with_session(session, provider=provider, prices=prices)
            purchases = await service.list_purchases(principal_id=MEMBER_ID, tenant_id=tenant_id)
            assert {p.tier for p in purchases} == {PurchaseTier.BASIC, PurchaseTier.PREMIUM}

            pending = await service.list_purchases(principal_id=MEMBER_ID, tenant_id=tenant_id, status="pending")
            assert len(pending) == 2
            completed = await service.list_purchases(principal_id=MEMBER_ID, tenant_id=tenant_id, status="completed")
            assert completed == []
            page = await service.list_purchases(principal_id=MEMBER_ID, tenant_id=tenant_id, limit=1)
            assert len(page) == 1

    @pytest.mark.asyncio
    async def test_unknown_status_filter(self, session_factory, provider, prices, tenant_id) -> None:
        async with session_factory() as session:
            service = PurchaseOrderService.with_session(session, provider=provider, prices=prices)
            with pytest.raises(InvalidArgumentError):
                await service.list_purchases(principal_id=OWNER_ID, tenant_id=tenant_id, status="refunded")

    @pytest.mark.asyncio
    async def test_outsider_cannot_list(self, session_factory, provider, prices, tenant_id) -> None:
        async with session_factory() as session:
            service = PurchaseOrderService.with_session(session, provider=provider, prices=prices)
            with pytest.raises(ForbiddenError):
                await service.list_purchases(principal_id=OUTSIDER_ID, tenant_id=tenant_id)
            with pytest.raises(ForbiddenError):
                await service.summarize(principal_id=OUTSIDER_ID, tenant_id=tenant_id)

    @pytest.mark.asyncio
    async def test_history_order_is_deterministic_within_a_second(
        self, session_factory, provider, prices, tenant_id
    ) -> None:
        for _ in range(4):
            await _create_order(
                session_factory, provider, prices,
                principal_id=OWNER_ID, tenant_id=tenant_id, tier="basic", quantity=1,
            )

        async with session_factory() as session:
            service = PurchaseOrderService.with_session(session, provider=provider, prices=prices)
            purchases = await service.list_purchases(principal_id=OWNER_ID, tenant_id=tenant_id)
            first_page = await service.list_purchases(principal_id=OWNER_ID, tenant_id=tenant_id, limit=2)
            second_page = await service.list_purchases(principal_id=OWNER_ID, tenant_id=tenant_id, limit=2, offset=2)

        expected = sorted(purchases, key=lambda p: (p.created_at, p.id), reverse=True)
        assert [p.id for p in purchases] == [p.id for p in expected]
        assert [p.id for p in first_page + second_page] == [p.id for p in purchases]
