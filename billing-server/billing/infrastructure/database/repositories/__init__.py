"""SQLAlchemy-backed repository implementations."""

from .balance_repository import SqlBalanceRepository
from .purchase_repository import SqlPurchaseIntentRepository
from .tenant_repository import SqlTenantRepository

__all__ = [
    "SqlBalanceRepository",
    "SqlPurchaseIntentRepository",
    "SqlTenantRepository",
]
