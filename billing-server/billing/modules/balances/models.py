"""Domain models for tenant token balances."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TokenPool(str, Enum):
    STANDARD = "standard"
    PREMIUM = "premium"


@dataclass(slots=True)
class BalanceSnapshot:
    tenant_id: str
    standard_tokens: int
    premium_tokens: int
    updated_at: Optional[datetime] = None
