"""Payment provider contract consumed by the order initiator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol


class PaymentProviderError(Exception):
    """Raised when the provider rejects or fails to answer an order request."""


@dataclass(slots=True)
class ProviderOrder:
    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"


class PaymentProvider(Protocol):
    @property
    def public_key(self) -> str:
        """Key id handed to the client-side checkout."""
        ...

    async def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> ProviderOrder:
        ...

    async def aclose(self) -> None:
        ...
