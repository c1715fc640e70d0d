"""SQLAlchemy implementation for tenant balances"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from billing.db.models import TenantBalance
from billing.modules.balances.models import BalanceSnapshot, TokenPool
from billing.modules.common import AsyncRepository

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SqlBalanceRepository(AsyncRepository[TenantBalance]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_balance(self, tenant_id: str) -> BalanceSnapshot | None:
        stmt = (
            select(TenantBalance)
            .where(TenantBalance.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_snapshot(model) if model else None

    async def ensure_balance(self, tenant_id: str) -> BalanceSnapshot:
        insert = _INSERT_BY_DIALECT.get(self.session.bind.dialect.name)
        if insert is None:
            raise RuntimeError(f"unsupported database dialect: {self.session.bind.dialect.name}")
        stmt = (
            insert(TenantBalance)
            .values(tenant_id=tenant_id, standard_tokens=0, premium_tokens=0)
            .on_conflict_do_nothing(index_elements=[TenantBalance.tenant_id])
        )
        await self.session.execute(stmt)
        snapshot = await self.get_balance(tenant_id)
        assert snapshot is not None
        return snapshot

    async def increment(self, tenant_id: str, pool: TokenPool, delta: int) -> int:
        column = self._column(pool)
        stmt = (
            update(TenantBalance)
            .where(TenantBalance.tenant_id == tenant_id)
            .values({column: column + delta})
            .returning(column)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        new_value = result.scalar_one_or_none()
        if new_value is None:
            await self.ensure_balance(tenant_id)
            result = await self.session.execute(stmt)
            new_value = result.scalar_one()
        return int(new_value)

    @staticmethod
    def _column(pool: TokenPool):
        if pool is TokenPool.PREMIUM:
            return TenantBalance.premium_tokens
        return TenantBalance.standard_tokens

    @staticmethod
    def _to_snapshot(model: TenantBalance) -> BalanceSnapshot:
        return BalanceSnapshot(
            tenant_id=model.tenant_id,
            standard_tokens=model.standard_tokens or 0,
            premium_tokens=model.premium_tokens or 0,
            updated_at=model.updated_at,
        )
