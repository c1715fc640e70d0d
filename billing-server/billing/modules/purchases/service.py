"""Token purchase order service."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from billing.core.exceptions import InvalidArgumentError, PaymentInternalError
from billing.modules.balances.repository import BalanceRepository
from billing.modules.tenants.service import TenantService

from .gateway import PaymentProvider, PaymentProviderError
from .models import CreatedOrder, NewPurchaseIntent, PurchaseIntent, PurchaseStatus, PurchaseSummary
from .pricing import PriceTable
from .repository import PurchaseIntentRepository

logger = logging.getLogger(__name__)


def receipt_for(intent_id: str) -> str:
    """Receipt label sent to the provider; the provider caps receipts at 40 characters."""
    return f"tp_{uuid.UUID(intent_id).hex}"


@dataclass(slots=True)
class PurchaseOrderService:
    intents: PurchaseIntentRepository
    balances: BalanceRepository
    tenants: TenantService
    provider: PaymentProvider
    prices: PriceTable

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        *,
        provider: PaymentProvider,
        prices: PriceTable,
        admin_roles: tuple[str, ...] = ("owner", "admin"),
    ) -> "PurchaseOrderService":
        from billing.infrastructure.database.repositories import SqlBalanceRepository, SqlPurchaseIntentRepository

        return cls(
            intents=SqlPurchaseIntentRepository(session),
            balances=SqlBalanceRepository(session),
            tenants=TenantService.with_session(session, admin_roles),
            provider=provider,
            prices=prices,
        )

    async def create_order(
        self,
        *,
        principal_id: str,
        tenant_id: str,
        tier: object,
        quantity: object,
    ) -> CreatedOrder:
        await self.tenants.require_admin(principal_id, tenant_id)
        purchase_tier = self.prices.parse_tier(tier)
        token_quantity = self.prices.validate_quantity(quantity)
        amount = self.prices.quote(purchase_tier, token_quantity)
        currency = self.prices.currency

        intent_id = str(uuid.uuid4())
        receipt = receipt_for(intent_id)
        try:
            order = await self.provider.create_order(
                amount=amount,
                currency=currency,
                receipt=receipt,
                notes={
                    "tenantId": tenant_id,
                    "tier": purchase_tier.value,
                    "quantity": str(token_quantity),
                    "intentId": intent_id,
                },
            )
        except PaymentProviderError as exc:
            logger.error("Provider order creation failed for tenant %s: %s", tenant_id, exc)
            raise PaymentInternalError("Payment provider unavailable, please retry") from exc

        try:
            await self.intents.create(
                NewPurchaseIntent(
                    id=intent_id,
                    tenant_id=tenant_id,
                    tier=purchase_tier,
                    quantity=token_quantity,
                    amount=amount,
                    currency=currency,
                    provider_order_id=order.id,
                    receipt=receipt,
                    created_by=principal_id,
                )
            )
            await self.balances.ensure_balance(tenant_id)
            await self.intents.commit()
        except SQLAlchemyError as exc:
            await self.intents.rollback()
            # the provider order exists but nothing links it to a tenant; receipt carries the intent id
            logger.error(
                "Orphaned provider order %s (receipt %s, tenant %s, amount %s %s): %s",
                order.id,
                receipt,
                tenant_id,
                amount,
                currency,
                exc,
            )
            raise PaymentInternalError("Failed to create purchase record, please retry") from exc

        logger.info(
            "Created purchase intent %s for tenant %s: %s x %s = %s %s (order %s)",
            intent_id,
            tenant_id,
            token_quantity,
            purchase_tier.value,
            amount,
            currency,
            order.id,
        )
        return CreatedOrder(
            provider_order_id=order.id,
            amount=amount,
            currency=currency,
            intent_id=intent_id,
            provider_public_key=self.provider.public_key,
        )

    async def list_purchases(
        self,
        *,
        principal_id: str,
        tenant_id: str,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseIntent]:
        await self.tenants.require_member(principal_id, tenant_id)
        status_filter = None
        if status and status != "all":
            try:
                status_filter = PurchaseStatus(status)
            except ValueError:
                raise InvalidArgumentError(f"unknown purchase status: {status}") from None
        rows = await self.intents.list_for_tenant(tenant_id, status=status_filter, limit=limit, offset=offset)
        return list(rows)

    async def summarize(self, *, principal_id: str, tenant_id: str) -> PurchaseSummary:
        await self.tenants.require_member(principal_id, tenant_id)
        return await self.intents.summarize(tenant_id)
