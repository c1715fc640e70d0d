"""Repository protocol for tenant balances."""

from __future__ import annotations

from typing import Protocol

from .models import BalanceSnapshot, TokenPool


class BalanceRepository(Protocol):
    async def get_balance(self, tenant_id: str) -> BalanceSnapshot | None:
        ...

    async def ensure_balance(self, tenant_id: str) -> BalanceSnapshot:
        ...

    async def increment(self, tenant_id: str, pool: TokenPool, delta: int) -> int:
        """Add *delta* to *pool* in one statement and return the new pool value."""
        ...
