"""Balance domain exports"""

from .models import BalanceSnapshot, TokenPool
from .service import BalanceService

__all__ = [
    "BalanceSnapshot",
    "BalanceService",
    "TokenPool",
]
