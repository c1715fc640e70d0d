"""Payment service dependency providers."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from billing.core.config import Settings, get_settings
from billing.core.container import ApplicationContainer
from billing.modules.balances import BalanceService
from billing.modules.purchases import PaymentProvider, PaymentVerificationService, PriceTable, PurchaseOrderService
from billing.modules.tenants import TenantService

from .database import get_db_session


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_payment_provider(container: ApplicationContainer = Depends(get_container)) -> PaymentProvider:
    return container.payment_provider


def get_price_table(container: ApplicationContainer = Depends(get_container)) -> PriceTable:
    return container.prices


def get_order_service(
    db: AsyncSession = Depends(get_db_session),
    provider: PaymentProvider = Depends(get_payment_provider),
    prices: PriceTable = Depends(get_price_table),
    settings: Settings = Depends(get_settings),
) -> PurchaseOrderService:
    return PurchaseOrderService.with_session(
        db,
        provider=provider,
        prices=prices,
        admin_roles=settings.security.admin_roles,
    )


def get_verification_service(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> PaymentVerificationService:
    return PaymentVerificationService.with_session(db, signing_secret=settings.payment_signing_secret)


def get_tenant_service(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> TenantService:
    return TenantService.with_session(db, settings.security.admin_roles)


def get_balance_service(db: AsyncSession = Depends(get_db_session)) -> BalanceService:
    return BalanceService.with_session(db)


__all__ = [
    "get_balance_service",
    "get_container",
    "get_order_service",
    "get_payment_provider",
    "get_price_table",
    "get_tenant_service",
    "get_verification_service",
]
