"""Tenant access checks."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from billing.core.exceptions import ForbiddenError

from .models import Membership, Tenant
from .repository import TenantRepository

logger = logging.getLogger(__name__)


class TenantService:
    """Answers membership questions for other modules."""

    def __init__(self, repository: TenantRepository, admin_roles: Iterable[str] = ("owner", "admin")) -> None:
        self._repository = repository
        self._admin_roles = tuple(admin_roles)

    @classmethod
    def with_session(cls, session: AsyncSession, admin_roles: Iterable[str] = ("owner", "admin")) -> "TenantService":
        from billing.infrastructure.database.repositories.tenant_repository import SqlTenantRepository

        return cls(SqlTenantRepository(session), admin_roles)

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        return await self._repository.get_tenant(tenant_id)

    async def create_tenant(self, name: str, *, owner_id: str, tenant_id: str | None = None) -> Tenant:
        tenant = await self._repository.create_tenant(name=name, tenant_id=tenant_id)
        await self._repository.add_membership(tenant_id=tenant.id, user_id=owner_id, role="owner")
        return tenant

    async def add_member(self, tenant_id: str, user_id: str, role: str = "member") -> Membership:
        return await self._repository.add_membership(tenant_id=tenant_id, user_id=user_id, role=role)

    async def require_member(self, principal_id: str, tenant_id: str) -> Membership:
        membership = await self._repository.get_membership(tenant_id, principal_id)
        if membership is None:
            logger.info("Principal %s is not a member of tenant %s", principal_id, tenant_id)
            raise ForbiddenError("Not a member of this tenant")
        return membership

    async def require_admin(self, principal_id: str, tenant_id: str) -> Membership:
        membership = await self._repository.get_membership(tenant_id, principal_id)
        if membership is None or not membership.has_role(self._admin_roles):
            logger.info("Principal %s lacks an admin role in tenant %s", principal_id, tenant_id)
            raise ForbiddenError()
        return membership
