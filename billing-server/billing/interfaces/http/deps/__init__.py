"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .payments import (
    get_balance_service,
    get_container,
    get_order_service,
    get_payment_provider,
    get_price_table,
    get_tenant_service,
    get_verification_service,
)

__all__ = [
    "get_db_session",
    "get_balance_service",
    "get_container",
    "get_order_service",
    "get_payment_provider",
    "get_price_table",
    "get_tenant_service",
    "get_verification_service",
]
