"""Fixed price table for token tiers.

Prices are integers in the currency's minor unit, so an order amount is
always ``unit_price * quantity`` with no rounding.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from billing.core.config import PricingSettings
from billing.core.exceptions import InvalidArgumentError

from .models import PurchaseTier


@dataclass(frozen=True, slots=True)
class PriceTable:
    unit_prices: Mapping[PurchaseTier, int]
    currency: str
    max_quantity: int

    @classmethod
    def from_settings(cls, settings: PricingSettings) -> "PriceTable":
        prices: dict[PurchaseTier, int] = {}
        for tier in PurchaseTier:
            price = settings.unit_prices.get(tier.value)
            if price is None or price <= 0:
                raise ValueError(f"missing or non-positive unit price for tier {tier.value!r}")
            prices[tier] = int(price)
        return cls(unit_prices=prices, currency=settings.currency, max_quantity=settings.max_quantity)

    def parse_tier(self, value: object) -> PurchaseTier:
        try:
            return PurchaseTier(value)
        except ValueError:
            allowed = ", ".join(tier.value for tier in PurchaseTier)
            raise InvalidArgumentError(f"tier must be one of: {allowed}") from None

    def validate_quantity(self, quantity: object) -> int:
        # bool is an int subclass; reject it explicitly
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidArgumentError("quantity must be an integer")
        if quantity < 1 or quantity > self.max_quantity:
            raise InvalidArgumentError(f"quantity must be an integer between 1 and {self.max_quantity:,}")
        return quantity

    def unit_price(self, tier: PurchaseTier) -> int:
        return self.unit_prices[tier]

    def quote(self, tier: PurchaseTier, quantity: int) -> int:
        return self.unit_price(tier) * quantity
