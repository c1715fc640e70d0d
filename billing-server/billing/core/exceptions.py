"""Error taxonomy shared by the HTTP layer and domain services.

Every error carries a stable machine-readable ``kind`` and the HTTP status
it maps to. The application factory renders them as
``{"kind": ..., "message": ...}``.
"""

from __future__ import annotations

from typing import Any


class PaymentError(Exception):
    """Base class for errors surfaced to API clients."""

    kind = "internal"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class UnauthorizedError(PaymentError):
    """Raised when the caller has no valid identity."""

    kind = "unauthorized"
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(PaymentError):
    """Raised when the caller is authenticated but lacks the required role."""

    kind = "forbidden"
    status_code = 403
    default_message = "Only tenant administrators can purchase tokens"


class InvalidArgumentError(PaymentError):
    """Raised when a request body fails validation."""

    kind = "invalid_argument"
    status_code = 400
    default_message = "Invalid request"


class PaymentInternalError(PaymentError):
    """Raised when storage or the payment provider is unavailable."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str | None = None, *, retryable: bool = True) -> None:
        super().__init__(message)
        self.retryable = retryable

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["retryable"] = self.retryable
        return payload


__all__ = [
    "PaymentError",
    "UnauthorizedError",
    "ForbiddenError",
    "InvalidArgumentError",
    "PaymentInternalError",
]
