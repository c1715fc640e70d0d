"""Token purchase endpoints: order creation, payment verification and billing views."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from billing.core.security import Principal, get_current_principal
from billing.modules.balances import BalanceService
from billing.modules.purchases import PaymentVerificationService, PurchaseIntent, PurchaseOrderService
from billing.modules.tenants import TenantService
from billing.interfaces.http.deps import (
    get_balance_service,
    get_order_service,
    get_tenant_service,
    get_verification_service,
)
from billing.schemas import (
    BalanceResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    ErrorResponse,
    PurchaseListResponse,
    PurchaseResponse,
    PurchaseSummaryResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


def _purchase_response(intent: PurchaseIntent) -> PurchaseResponse:
    return PurchaseResponse(
        id=intent.id,
        tier=intent.tier.value,
        quantity=intent.quantity,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status.value,
        provider_order_id=intent.provider_order_id,
        provider_payment_id=intent.provider_payment_id,
        created_by=intent.created_by,
        created_at=intent.created_at,
        completed_at=intent.completed_at,
    )


@router.post(
    "/orders",
    response_model=CreateOrderResponse,
    response_model_by_alias=True,
    summary="Create a provider order for a token purchase",
)
async def create_order(
    payload: CreateOrderRequest,
    principal: Principal = Depends(get_current_principal),
    service: PurchaseOrderService = Depends(get_order_service),
) -> CreateOrderResponse:
    order = await service.create_order(
        principal_id=principal.principal_id,
        tenant_id=payload.tenant_id,
        tier=payload.tier,
        quantity=payload.quantity,
    )
    return CreateOrderResponse(
        order_id=order.provider_order_id,
        amount=order.amount,
        currency=order.currency,
        intent_id=order.intent_id,
        provider_public_key=order.provider_public_key,
    )


@router.post(
    "/verify",
    response_model=VerifyPaymentResponse,
    response_model_by_alias=True,
    summary="Verify a payment proof and credit tokens",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def verify_payment(
    payload: VerifyPaymentRequest,
    principal: Principal = Depends(get_current_principal),
    service: PaymentVerificationService = Depends(get_verification_service),
) -> VerifyPaymentResponse:
    result = await service.verify_and_credit(
        principal_id=principal.principal_id,
        intent_id=payload.intent_id,
        provider_order_id=payload.order_id,
        provider_payment_id=payload.payment_id,
        proof=payload.signature,
    )
    return VerifyPaymentResponse(
        purchase_type=result.purchase_type.value,
        tokens_added=result.tokens_added,
        new_balance=result.new_balance,
    )


@router.get("/balance", response_model=BalanceResponse, response_model_by_alias=True, summary="Tenant token balance")
async def get_balance(
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    principal: Principal = Depends(get_current_principal),
    tenants: TenantService = Depends(get_tenant_service),
    balances: BalanceService = Depends(get_balance_service),
) -> BalanceResponse:
    await tenants.require_member(principal.principal_id, tenant_id)
    snapshot = await balances.get_snapshot(tenant_id)
    return BalanceResponse(
        tenant_id=snapshot.tenant_id,
        standard_tokens=snapshot.standard_tokens,
        premium_tokens=snapshot.premium_tokens,
        updated_at=snapshot.updated_at,
    )


@router.get(
    "/purchases",
    response_model=PurchaseListResponse,
    response_model_by_alias=True,
    summary="Purchase history, newest first",
)
async def list_purchases(
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_current_principal),
    service: PurchaseOrderService = Depends(get_order_service),
) -> PurchaseListResponse:
    intents = await service.list_purchases(
        principal_id=principal.principal_id,
        tenant_id=tenant_id,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    return PurchaseListResponse(purchases=[_purchase_response(intent) for intent in intents])


@router.get(
    "/purchases/summary",
    response_model=PurchaseSummaryResponse,
    response_model_by_alias=True,
    summary="Credited totals re-derived from the purchase trail",
)
async def purchase_summary(
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    principal: Principal = Depends(get_current_principal),
    service: PurchaseOrderService = Depends(get_order_service),
) -> PurchaseSummaryResponse:
    summary = await service.summarize(principal_id=principal.principal_id, tenant_id=tenant_id)
    return PurchaseSummaryResponse(
        tenant_id=summary.tenant_id,
        credited_standard_tokens=summary.credited_standard_tokens,
        credited_premium_tokens=summary.credited_premium_tokens,
        pending_count=summary.pending_count,
        completed_count=summary.completed_count,
        failed_count=summary.failed_count,
    )
