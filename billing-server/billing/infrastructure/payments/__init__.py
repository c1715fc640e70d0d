"""Payment provider clients."""

from .razorpay import RazorpayClient

__all__ = ["RazorpayClient"]
