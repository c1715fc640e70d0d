"""Repository protocol for tenants and memberships."""

from __future__ import annotations

from typing import Protocol

from .models import Membership, Tenant


class TenantRepository(Protocol):
    """Abstract repository interface for tenant persistence."""

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        ...

    async def create_tenant(self, *, name: str, tenant_id: str | None = None) -> Tenant:
        ...

    async def get_membership(self, tenant_id: str, user_id: str) -> Membership | None:
        ...

    async def add_membership(self, *, tenant_id: str, user_id: str, role: str) -> Membership:
        ...
