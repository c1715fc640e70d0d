"""Simple dependency container for wiring core services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from billing.core.config import Settings
from billing.infrastructure.database.session import get_engine
from billing.infrastructure.payments import RazorpayClient
from billing.modules.purchases.gateway import PaymentProvider
from billing.modules.purchases.pricing import PriceTable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    payment_provider: PaymentProvider
    prices: PriceTable

    @classmethod
    def build(cls, settings: Settings, payment_provider: PaymentProvider | None = None) -> "ApplicationContainer":
        return cls(
            settings=settings,
            payment_provider=payment_provider or RazorpayClient.from_settings(settings.payments),
            prices=PriceTable.from_settings(settings.pricing),
        )

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine()

    async def aclose(self) -> None:
        await self.payment_provider.aclose()
        logger.info("Payment provider client closed")


__all__ = ["ApplicationContainer"]
