"""Domain models for token purchase intents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from billing.modules.balances.models import TokenPool


class PurchaseTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"

    @property
    def pool(self) -> TokenPool:
        return TokenPool.PREMIUM if self is PurchaseTier.PREMIUM else TokenPool.STANDARD


class PurchaseStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PurchaseStatus.PENDING


@dataclass(slots=True)
class PurchaseIntent:
    id: str
    tenant_id: str
    tier: PurchaseTier
    quantity: int
    amount: int
    currency: str
    status: PurchaseStatus
    provider_order_id: str
    receipt: str
    created_by: str
    provider_payment_id: Optional[str] = None
    proof: Optional[str] = field(default=None, repr=False)
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(slots=True)
class NewPurchaseIntent:
    id: str
    tenant_id: str
    tier: PurchaseTier
    quantity: int
    amount: int
    currency: str
    provider_order_id: str
    receipt: str
    created_by: str


@dataclass(slots=True)
class CreatedOrder:
    provider_order_id: str
    amount: int
    currency: str
    intent_id: str
    provider_public_key: str


@dataclass(slots=True)
class CreditResult:
    purchase_type: PurchaseTier
    tokens_added: int
    new_balance: int
    intent_id: str


@dataclass(slots=True)
class PurchaseSummary:
    """Totals re-derived from the intent trail for reconciliation."""

    tenant_id: str
    credited_standard_tokens: int = 0
    credited_premium_tokens: int = 0
    pending_count: int = 0
    completed_count: int = 0
    failed_count: int = 0
