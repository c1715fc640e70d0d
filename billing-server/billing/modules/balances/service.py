"""Tenant balance service"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .models import BalanceSnapshot, TokenPool
from .repository import BalanceRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BalanceService:
    repository: BalanceRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "BalanceService":
        from billing.infrastructure.database.repositories.balance_repository import SqlBalanceRepository

        return cls(SqlBalanceRepository(session))

    async def ensure_balance(self, tenant_id: str) -> BalanceSnapshot:
        return await self.repository.ensure_balance(tenant_id)

    async def get_snapshot(self, tenant_id: str) -> BalanceSnapshot:
        snapshot = await self.repository.get_balance(tenant_id)
        if snapshot is None:
            return BalanceSnapshot(tenant_id=tenant_id, standard_tokens=0, premium_tokens=0)
        return snapshot

    async def credit(self, tenant_id: str, pool: TokenPool, quantity: int) -> int:
        """Add tokens to one pool inside the caller's transaction.

        Called by the payment verifier once an intent has moved from
        ``pending`` to ``completed``; the caller commits.
        """
        if quantity <= 0:
            raise ValueError("credit quantity must be positive")
        new_balance = await self.repository.increment(tenant_id, pool, quantity)
        logger.info("Credited %s %s tokens to tenant %s (balance %s)", quantity, pool.value, tenant_id, new_balance)
        return new_balance
