"""Repository interface for purchase intents."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import NewPurchaseIntent, PurchaseIntent, PurchaseStatus, PurchaseSummary


class PurchaseIntentRepository(Protocol):
    async def create(self, intent: NewPurchaseIntent) -> PurchaseIntent:
        ...

    async def get_for_order(self, intent_id: str, provider_order_id: str) -> PurchaseIntent | None:
        ...

    async def complete_if_pending(
        self,
        intent_id: str,
        *,
        provider_order_id: str,
        provider_payment_id: str,
        proof: str,
        completed_at: datetime,
    ) -> PurchaseIntent | None:
        """Move a pending intent to completed; ``None`` when no pending row matched."""
        ...

    async def fail_if_pending(
        self,
        intent_id: str,
        *,
        provider_order_id: str,
        failed_at: datetime,
    ) -> PurchaseIntent | None:
        ...

    async def list_for_tenant(
        self,
        tenant_id: str,
        *,
        status: PurchaseStatus | None,
        limit: int,
        offset: int,
    ) -> Sequence[PurchaseIntent]:
        ...

    async def summarize(self, tenant_id: str) -> PurchaseSummary:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
