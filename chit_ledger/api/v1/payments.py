"""Member payment endpoints - limits and payment previews"""

import time
import uuid
import logging
from typing import List, Tuple
from fastapi import APIRouter, Depends, HTTPException, Request

from chit_ledger.api.v1.schemas import (
    PaymentPreviewRequest,
    PaymentPreviewResponse,
    PaymentLimitsSchema,
    PaymentBreakdownSchema,
    PaymentMessageSchema,
    PaymentValidationSchema,
    MemberPaymentSummarySchema,
    CycleAllocationSchema,
    CyclePaymentStatusSchema,
    AdvanceApplicationSchema,
)
from chit_ledger.api.dependencies import ChitFundStore, get_store, get_request_id
from chit_ledger.config import settings
from chit_ledger.domain.models import Fund, Cycle, PaymentHistoryEntry
from chit_ledger.domain.payments import compute_limits, compute_breakdown, classify_payment, is_valid_payment_amount
from chit_ledger.domain.allocation import (
    member_cycle_statuses,
    member_payment_summary,
    allocate_payment,
    next_payable_cycle,
    apply_advance_balance,
)
from chit_ledger.domain.exceptions import DataUnavailableError, FundNotFoundError
from chit_ledger.infrastructure.observability.metrics import record_payment_preview, store_failures_counter
from chit_ledger.infrastructure.observability.logging import log_payment_preview

router = APIRouter()


def _check_id(value: str, label: str) -> None:
    try:
        uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


async def _load_member_snapshot(
    store: ChitFundStore,
    fund_id: str,
    member_id: str,
    request_id: str,
    with_cycles: bool = False,
) -> Tuple[Fund, List[PaymentHistoryEntry], List[Cycle]]:
    """
    Read fund, settled payments and (optionally) cycles for one member.

    The reads are not transactional; a collection closed between them is
    picked up on the next call.
    """
    try:
        fund = await store.get_fund(fund_id)
        history = await store.get_settled_payments(fund_id, member_id)
        cycles = await store.get_cycles(fund_id) if with_cycles else []
        return fund, history, cycles

    except FundNotFoundError as e:
        logging.warning(f"Fund not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Chit fund not found")

    except DataUnavailableError as e:
        store_failures_counter.inc()
        logging.error(f"Store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Fund store unavailable")


@router.get("/funds/{fund_id}/members/{member_id}/payment-limits", response_model=PaymentLimitsSchema)
async def get_payment_limits(
    fund_id: str,
    member_id: str,
    request: Request,
    store: ChitFundStore = Depends(get_store),
):
    """
    Minimum, maximum and recommended payment for a member.

    Returns:
        Limits derived from the fund terms and the member's settled payments
    """
    _check_id(fund_id, "fund")
    _check_id(member_id, "member")
    request_id = get_request_id(request)

    fund, history, _ = await _load_member_snapshot(store, fund_id, member_id, request_id)

    try:
        limits = compute_limits(fund, history)
    except ValueError as e:
        logging.warning(f"Invalid fund terms: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return PaymentLimitsSchema.model_validate(limits)


@router.post("/funds/{fund_id}/members/{member_id}/payment-preview", response_model=PaymentPreviewResponse)
async def preview_payment(
    fund_id: str,
    member_id: str,
    request_body: PaymentPreviewRequest,
    request: Request,
    store: ChitFundStore = Depends(get_store),
):
    """
    Preview how a candidate payment would be applied.

    Flow:
    1. Read fund terms, settled payments and cycles from the store
    2. Derive payment limits
    3. Break the payment into current cycle vs advance and classify it
    4. Validate the amount against the limits
    5. Allocate a valid payment oldest-first across unpaid cycles
    6. Show how the advance portion auto-pays later cycles
    """
    _check_id(fund_id, "fund")
    _check_id(member_id, "member")
    start_time = time.time()
    request_id = get_request_id(request)
    amount = request_body.payment_amount

    fund, history, cycles = await _load_member_snapshot(store, fund_id, member_id, request_id, with_cycles=True)

    try:
        limits = compute_limits(fund, history)
    except ValueError as e:
        logging.warning(f"Invalid fund terms: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    breakdown = compute_breakdown(amount, limits)
    message = classify_payment(amount, limits, settings.currency_symbol)
    validation = is_valid_payment_amount(amount, limits, settings.currency_symbol)

    statuses = member_cycle_statuses(fund, cycles, history)
    allocations = allocate_payment(amount, statuses) if validation.is_valid else []
    summary = member_payment_summary(fund, cycles, history)
    next_cycle = next_payable_cycle(statuses)
    # Cycles after the current one that the advance can settle
    advance = apply_advance_balance(
        breakdown.advance_amount, limits.installment_amount, max(0, limits.cycles_remaining - 1)
    )

    duration_ms = (time.time() - start_time) * 1000
    record_payment_preview(message.kind, breakdown.cycles_covered)
    log_payment_preview(request_id, fund_id, member_id, message.kind, validation.is_valid, duration_ms)

    return PaymentPreviewResponse(
        fund_id=fund_id,
        member_id=member_id,
        payment_amount=amount,
        limits=PaymentLimitsSchema.model_validate(limits),
        breakdown=PaymentBreakdownSchema.model_validate(breakdown),
        message=PaymentMessageSchema.model_validate(message),
        validation=PaymentValidationSchema.model_validate(validation),
        summary=MemberPaymentSummarySchema.model_validate(summary),
        allocations=[CycleAllocationSchema.model_validate(a) for a in allocations],
        advance=AdvanceApplicationSchema.model_validate(advance),
        next_payable_cycle=CyclePaymentStatusSchema.model_validate(next_cycle) if next_cycle else None,
    )
