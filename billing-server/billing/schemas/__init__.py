"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateOrderRequest(CamelModel):
    # ranges are checked by the order service; strict so booleans and numeric strings are not coerced
    tier: str
    quantity: StrictInt
    tenant_id: str = Field(..., min_length=1)


class CreateOrderResponse(CamelModel):
    order_id: str
    amount: int
    currency: str
    intent_id: str
    provider_public_key: str


class VerifyPaymentRequest(CamelModel):
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)
    intent_id: str = Field(..., min_length=1)


class VerifyPaymentResponse(CamelModel):
    success: bool = True
    purchase_type: str
    tokens_added: int
    new_balance: int


class BalanceResponse(CamelModel):
    tenant_id: str
    standard_tokens: int
    premium_tokens: int
    updated_at: Optional[datetime] = None


class PurchaseResponse(CamelModel):
    id: str
    tier: str
    quantity: int
    amount: int
    currency: str
    status: str
    provider_order_id: str
    provider_payment_id: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class PurchaseListResponse(CamelModel):
    purchases: list[PurchaseResponse] = Field(default_factory=list)


class PurchaseSummaryResponse(CamelModel):
    tenant_id: str
    credited_standard_tokens: int
    credited_premium_tokens: int
    pending_count: int
    completed_count: int
    failed_count: int


class ErrorResponse(BaseModel):
    kind: str
    message: str
    state: Optional[str] = None
    retryable: Optional[bool] = None
