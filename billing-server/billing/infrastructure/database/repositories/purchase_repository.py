"""SQLAlchemy implementation for purchase intents"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import case, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from billing.db.models import PurchaseIntent as PurchaseIntentModel
from billing.modules.common import AsyncRepository
from billing.modules.purchases.models import (
    NewPurchaseIntent,
    PurchaseIntent,
    PurchaseStatus,
    PurchaseSummary,
    PurchaseTier,
)


class SqlPurchaseIntentRepository(AsyncRepository[PurchaseIntentModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create(self, intent: NewPurchaseIntent) -> PurchaseIntent:
        model = PurchaseIntentModel(
            id=intent.id,
            tenant_id=intent.tenant_id,
            tier=intent.tier.value,
            quantity=intent.quantity,
            amount=intent.amount,
            currency=intent.currency,
            status=PurchaseStatus.PENDING.value,
            provider_order_id=intent.provider_order_id,
            receipt=intent.receipt,
            created_by=intent.created_by,
        )
        await self.add(model)
        await self.session.refresh(model)
        return self._to_domain(model)

    async def get_for_order(self, intent_id: str, provider_order_id: str) -> PurchaseIntent | None:
        stmt = (
            select(PurchaseIntentModel)
            .where(
                PurchaseIntentModel.id == intent_id,
                PurchaseIntentModel.provider_order_id == provider_order_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def complete_if_pending(
        self,
        intent_id: str,
        *,
        provider_order_id: str,
        provider_payment_id: str,
        proof: str,
        completed_at: datetime,
    ) -> PurchaseIntent | None:
        return await self._transition(
            intent_id,
            provider_order_id=provider_order_id,
            values={
                "status": PurchaseStatus.COMPLETED.value,
                "provider_payment_id": provider_payment_id,
                "proof": proof,
                "completed_at": completed_at,
            },
        )

    async def fail_if_pending(
        self,
        intent_id: str,
        *,
        provider_order_id: str,
        failed_at: datetime,
    ) -> PurchaseIntent | None:
        return await self._transition(
            intent_id,
            provider_order_id=provider_order_id,
            values={"status": PurchaseStatus.FAILED.value, "completed_at": failed_at},
        )

    async def _transition(self, intent_id: str, *, provider_order_id: str, values: dict) -> PurchaseIntent | None:
        # the status predicate makes this a compare-and-swap; the row count decides the winner
        stmt = (
            update(PurchaseIntentModel)
            .where(
                PurchaseIntentModel.id == intent_id,
                PurchaseIntentModel.provider_order_id == provider_order_id,
                PurchaseIntentModel.status == PurchaseStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
            .returning(PurchaseIntentModel)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_for_tenant(
        self,
        tenant_id: str,
        *,
        status: PurchaseStatus | None,
        limit: int,
        offset: int,
    ) -> Sequence[PurchaseIntent]:
        stmt = select(PurchaseIntentModel).where(PurchaseIntentModel.tenant_id == tenant_id)
        if status is not None:
            stmt = stmt.where(PurchaseIntentModel.status == status.value)
        # created_at has one-second resolution on SQLite; id breaks ties
        stmt = (
            stmt.order_by(desc(PurchaseIntentModel.created_at), desc(PurchaseIntentModel.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def summarize(self, tenant_id: str) -> PurchaseSummary:
        completed = PurchaseIntentModel.status == PurchaseStatus.COMPLETED.value
        stmt = (
            select(
                PurchaseIntentModel.tier,
                PurchaseIntentModel.status,
                func.count(PurchaseIntentModel.id),
                func.coalesce(func.sum(case((completed, PurchaseIntentModel.quantity), else_=0)), 0),
            )
            .where(PurchaseIntentModel.tenant_id == tenant_id)
            .group_by(PurchaseIntentModel.tier, PurchaseIntentModel.status)
        )
        result = await self.session.execute(stmt)

        summary = PurchaseSummary(tenant_id=tenant_id)
        for tier, status, count, credited in result.all():
            status = PurchaseStatus(status)
            if status is PurchaseStatus.PENDING:
                summary.pending_count += count
            elif status is PurchaseStatus.COMPLETED:
                summary.completed_count += count
            else:
                summary.failed_count += count
            if PurchaseTier(tier) is PurchaseTier.PREMIUM:
                summary.credited_premium_tokens += int(credited)
            else:
                summary.credited_standard_tokens += int(credited)
        return summary

    @staticmethod
    def _to_domain(model: PurchaseIntentModel) -> PurchaseIntent:
        return PurchaseIntent(
            id=model.id,
            tenant_id=model.tenant_id,
            tier=PurchaseTier(model.tier),
            quantity=model.quantity,
            amount=model.amount,
            currency=model.currency,
            status=PurchaseStatus(model.status),
            provider_order_id=model.provider_order_id,
            receipt=model.receipt,
            created_by=model.created_by,
            provider_payment_id=model.provider_payment_id,
            proof=model.proof,
            created_at=model.created_at,
            completed_at=model.completed_at,
        )
