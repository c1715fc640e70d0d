"""Token purchase domain exports"""

from .exceptions import InvalidSignatureError, PurchaseAlreadyProcessedError, PurchaseNotFoundError
from .gateway import PaymentProvider, PaymentProviderError, ProviderOrder
from .models import CreatedOrder, CreditResult, PurchaseIntent, PurchaseStatus, PurchaseSummary, PurchaseTier
from .pricing import PriceTable
from .service import PurchaseOrderService
from .verification import PaymentVerificationService

__all__ = [
    "CreatedOrder",
    "CreditResult",
    "InvalidSignatureError",
    "PaymentProvider",
    "PaymentProviderError",
    "PaymentVerificationService",
    "PriceTable",
    "ProviderOrder",
    "PurchaseAlreadyProcessedError",
    "PurchaseIntent",
    "PurchaseNotFoundError",
    "PurchaseOrderService",
    "PurchaseStatus",
    "PurchaseSummary",
    "PurchaseTier",
]
