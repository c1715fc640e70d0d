"""SQLAlchemy implementation of the tenant repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing.db.models import Tenant as TenantModel, TenantMembership as MembershipModel
from billing.modules.common import AsyncRepository
from billing.modules.tenants.models import Membership, Tenant


class SqlTenantRepository(AsyncRepository[TenantModel]):
    """Tenant and membership lookups backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        model = await self.session.get(TenantModel, tenant_id)
        if model is None:
            return None
        return Tenant(id=model.id, name=model.name, created_at=model.created_at)

    async def create_tenant(self, *, name: str, tenant_id: str | None = None) -> Tenant:
        model = TenantModel(name=name)
        if tenant_id is not None:
            model.id = tenant_id
        await self.add(model)
        await self.session.refresh(model)
        return Tenant(id=model.id, name=model.name, created_at=model.created_at)

    async def get_membership(self, tenant_id: str, user_id: str) -> Membership | None:
        stmt = select(MembershipModel).where(
            MembershipModel.tenant_id == tenant_id,
            MembershipModel.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return self._to_membership(result.scalar_one_or_none())

    async def add_membership(self, *, tenant_id: str, user_id: str, role: str) -> Membership:
        model = MembershipModel(tenant_id=tenant_id, user_id=user_id, role=role)
        await self.add(model)
        await self.session.refresh(model)
        return self._to_membership(model)

    @staticmethod
    def _to_membership(model: MembershipModel | None) -> Membership | None:
        if model is None:
            return None
        return Membership(
            tenant_id=model.tenant_id,
            user_id=model.user_id,
            role=model.role or "member",
            created_at=model.created_at,
        )
