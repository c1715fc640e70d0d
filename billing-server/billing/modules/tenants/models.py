"""Domain models for tenants and memberships."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Tenant:
    id: str
    name: str
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class Membership:
    tenant_id: str
    user_id: str
    role: str
    created_at: Optional[datetime] = None

    def has_role(self, roles: Iterable[str]) -> bool:
        return self.role.lower() in {role.lower() for role in roles}
