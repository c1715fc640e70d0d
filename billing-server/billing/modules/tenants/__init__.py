"""Tenant domain exports"""

from .models import Membership, Tenant
from .service import TenantService

__all__ = [
    "Membership",
    "Tenant",
    "TenantService",
]
