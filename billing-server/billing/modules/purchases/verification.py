"""Payment verification and ledger credit.

A pending intent moves to ``completed`` or ``failed`` exactly once. The
conditional update in :meth:`PurchaseIntentRepository.complete_if_pending`
decides which concurrent caller wins, and the balance increment runs in
the same transaction, so a failure before commit leaves the intent
``pending`` and the call can be retried with the same proof.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from billing.core.crypto import verify_payment_signature
from billing.core.exceptions import PaymentInternalError
from billing.modules.balances.service import BalanceService

from .exceptions import InvalidSignatureError, PurchaseAlreadyProcessedError, PurchaseNotFoundError
from .models import CreditResult
from .repository import PurchaseIntentRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class PaymentVerificationService:
    intents: PurchaseIntentRepository
    balances: BalanceService
    signing_secret: str = field(repr=False)
    clock: Callable[[], datetime] = _utcnow

    @classmethod
    def with_session(cls, session: AsyncSession, *, signing_secret: str) -> "PaymentVerificationService":
        from billing.infrastructure.database.repositories import SqlPurchaseIntentRepository

        return cls(
            intents=SqlPurchaseIntentRepository(session),
            balances=BalanceService.with_session(session),
            signing_secret=signing_secret,
        )

    async def verify_and_credit(
        self,
        *,
        principal_id: str,
        intent_id: str,
        provider_order_id: str,
        provider_payment_id: str,
        proof: str,
    ) -> CreditResult:
        try:
            return await self._verify_and_credit(
                principal_id=principal_id,
                intent_id=intent_id,
                provider_order_id=provider_order_id,
                provider_payment_id=provider_payment_id,
                proof=proof,
            )
        except SQLAlchemyError as exc:
            await self.intents.rollback()
            logger.error("Storage failure while verifying intent %s: %s", intent_id, exc)
            raise PaymentInternalError("Storage unavailable, please retry") from exc

    async def _verify_and_credit(
        self,
        *,
        principal_id: str,
        intent_id: str,
        provider_order_id: str,
        provider_payment_id: str,
        proof: str,
    ) -> CreditResult:
        if not verify_payment_signature(provider_order_id, provider_payment_id, proof, self.signing_secret):
            failed = await self.intents.fail_if_pending(
                intent_id,
                provider_order_id=provider_order_id,
                failed_at=self.clock(),
            )
            await self.intents.commit()
            logger.warning(
                "Invalid payment signature for intent %s (order %s, principal %s); intent %s",
                intent_id,
                provider_order_id,
                principal_id,
                "marked failed" if failed else "left unchanged",
            )
            raise InvalidSignatureError()

        intent = await self.intents.get_for_order(intent_id, provider_order_id)
        if intent is None:
            raise PurchaseNotFoundError()
        if intent.status.is_terminal:
            logger.info("Replay for intent %s rejected (state %s)", intent_id, intent.status.value)
            raise PurchaseAlreadyProcessedError(intent.status.value)

        completed = await self.intents.complete_if_pending(
            intent_id,
            provider_order_id=provider_order_id,
            provider_payment_id=provider_payment_id,
            proof=proof,
            completed_at=self.clock(),
        )
        if completed is None:
            await self.intents.rollback()
            current = await self.intents.get_for_order(intent_id, provider_order_id)
            state = current.status.value if current else "unknown"
            logger.info("Intent %s was completed by a concurrent request (state %s)", intent_id, state)
            raise PurchaseAlreadyProcessedError(state)

        new_balance = await self.balances.credit(completed.tenant_id, completed.tier.pool, completed.quantity)
        await self.intents.commit()

        logger.info(
            "Intent %s completed: credited %s %s tokens to tenant %s (balance %s, payment %s)",
            completed.id,
            completed.quantity,
            completed.tier.pool.value,
            completed.tenant_id,
            new_balance,
            provider_payment_id,
        )
        return CreditResult(
            purchase_type=completed.tier,
            tokens_added=completed.quantity,
            new_balance=new_balance,
            intent_id=completed.id,
        )
