"""Utilities for payment signature computation and verification."""

from __future__ import annotations

import hashlib
import hmac


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Return the hex HMAC-SHA256 of ``order_id|payment_id`` keyed by *secret*."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """Check a provider-issued signature in constant time."""
    if not signature:
        return False
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


__all__ = ["compute_payment_signature", "verify_payment_signature"]
