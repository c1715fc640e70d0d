"""Tests for billing/core/crypto.py

Covers:
- Signature matches an independently computed HMAC-SHA256
- Single-bit changes in order id, payment id, secret or signature fail
- Empty signatures are rejected
"""

from __future__ import annotations

import hashlib
import hmac

import pytest

from billing.core.crypto import compute_payment_signature, verify_payment_signature

ORDER_ID = "order_NTx3Gq1mYb7Q2d"
PAYMENT_ID = "pay_NTx3KXh8fJ0vLm"
SECRET = "whsec_0123456789abcdef"


def _flip_bit(value: str, index: int = 0) -> str:
    chars = list(value)
    chars[index] = chr(ord(chars[index]) ^ 0x01)
    return "".join(chars)


class TestComputeSignature:
    def test_matches_reference_hmac(self) -> None:
        expected = hmac.new(
            SECRET.encode("utf-8"),
            f"{ORDER_ID}|{PAYMENT_ID}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        assert compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET) == expected

    def test_lowercase_hex(self) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert len(signature) == 64
        assert signature == signature.lower()
        int(signature, 16)


class TestVerifySignature:
    def test_valid_signature_accepted(self) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert verify_payment_signature(ORDER_ID, PAYMENT_ID, signature, SECRET)

    @pytest.mark.parametrize("index", [0, 6, len(ORDER_ID) - 1])
    def test_order_id_bit_flip_rejected(self, index: int) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert not verify_payment_signature(_flip_bit(ORDER_ID, index), PAYMENT_ID, signature, SECRET)

    @pytest.mark.parametrize("index", [0, 4, len(PAYMENT_ID) - 1])
    def test_payment_id_bit_flip_rejected(self, index: int) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert not verify_payment_signature(ORDER_ID, _flip_bit(PAYMENT_ID, index), signature, SECRET)

    def test_secret_bit_flip_rejected(self) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert not verify_payment_signature(ORDER_ID, PAYMENT_ID, signature, _flip_bit(SECRET, 3))

    def test_signature_bit_flip_rejected(self) -> None:
        signature = compute_payment_signature(ORDER_ID, PAYMENT_ID, SECRET)
        assert not verify_payment_signature(ORDER_ID, PAYMENT_ID, _flip_bit(signature, 10), SECRET)

    def test_separator_is_part_of_message(self) -> None:
        # "ab|c" and "a|bc" must not collide
        signature = compute_payment_signature("ab", "c", SECRET)
        assert not verify_payment_signature("a", "bc", signature, SECRET)

    def test_empty_signature_rejected(self) -> None:
        assert not verify_payment_signature(ORDER_ID, PAYMENT_ID, "", SECRET)
