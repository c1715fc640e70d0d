"""Purchase domain specific exceptions."""

from __future__ import annotations

from typing import Any

from billing.core.exceptions import PaymentError


class InvalidSignatureError(PaymentError):
    """Raised when the provider proof does not match the order/payment pair."""

    kind = "invalid_signature"
    status_code = 400
    default_message = "Invalid payment signature"


class PurchaseNotFoundError(PaymentError):
    """Raised when no intent matches the supplied intent id and order id."""

    kind = "not_found"
    status_code = 404
    default_message = "Purchase record not found"


class PurchaseAlreadyProcessedError(PaymentError):
    """Raised when the intent has already left the pending state."""

    kind = "conflict"
    status_code = 409
    default_message = "Purchase already processed"

    def __init__(self, state: str, message: str | None = None) -> None:
        super().__init__(message)
        self.state = state

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["state"] = self.state
        return payload
