"""Payment allocation engine - limits, breakdown and advisory messages for member payments"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Iterable
from chit_ledger.domain.models import (
    Fund,
    PaymentHistoryEntry,
    PaymentLimits,
    PaymentBreakdown,
    PaymentMessage,
    PaymentValidation,
)
from chit_ledger.utils.money import ZERO, to_money, format_currency

INVALID_AMOUNT = "INVALID_AMOUNT"
RECOMMENDED_CYCLES = 3
HUNDRED = Decimal("100.00")


def compute_limits(fund: Fund, payment_history: Iterable[PaymentHistoryEntry]) -> PaymentLimits:
    """
    Derive minimum/maximum/recommended payment bounds for a member.

    Only settled ("closed") entries count toward total_paid. Every subtraction
    is clamped at zero so an overpaid member reports no remaining obligation.

    Example:
        installment 5000, 12 cycles, nothing paid
        → minimum 5000, maximum 60000, recommended 15000, 12 cycles remaining
    """
    installment = to_money(fund.installment_amount)
    if installment <= 0:
        raise ValueError("Fund installment amount must be greater than 0")
    if fund.duration_cycles < 1:
        raise ValueError("Fund duration must be at least 1 cycle")

    total_paid = to_money(sum((to_money(p.amount_collected) for p in payment_history if p.is_settled), ZERO))
    total_obligation = installment * fund.duration_cycles
    remaining = max(ZERO, total_obligation - total_paid)

    cycles_remaining = int((remaining / installment).to_integral_value(rounding=ROUND_CEILING))

    return PaymentLimits(
        # A final partial cycle never demands more than what is left
        minimum=min(installment, remaining),
        maximum=remaining,
        recommended=min(installment * RECOMMENDED_CYCLES, remaining),
        total_obligation=total_obligation,
        total_paid=total_paid,
        remaining_obligation=remaining,
        installment_amount=installment,
        cycles_remaining=cycles_remaining,
        total_cycles=fund.duration_cycles,
    )


def compute_breakdown(payment_amount: Decimal, limits: PaymentLimits) -> PaymentBreakdown:
    """
    Split a payment into current-cycle and advance portions.

    Bounds are not checked here; callers validate with is_valid_payment_amount.
    current_cycle + advance_amount always equals payment_amount exactly.
    """
    amount = to_money(payment_amount)
    installment = limits.installment_amount

    current_cycle = min(amount, installment)
    advance_amount = max(ZERO, amount - installment)
    # Whole future cycles beyond the current one; the remainder stays as partial credit
    cycles_covered = int(advance_amount // installment)
    remaining_after = max(ZERO, limits.remaining_obligation - amount)

    percentage = ((limits.total_paid + amount) / limits.total_obligation * 100).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )

    return PaymentBreakdown(
        current_cycle=current_cycle,
        advance_amount=advance_amount,
        cycles_covered=cycles_covered,
        remaining_after_payment=remaining_after,
        percentage_complete=min(HUNDRED, percentage),
    )


def classify_payment(
    payment_amount: Decimal,
    limits: PaymentLimits,
    currency_symbol: str = "₹",
) -> PaymentMessage:
    """
    Classify a candidate payment for user feedback (first match wins):

    1. above maximum           → error
    2. below minimum           → error
    3. exactly one installment → success
    4. above one installment   → info (advance, possibly multi-cycle)
    5. otherwise               → info (partial payment)
    """
    amount = to_money(payment_amount)

    if amount > limits.maximum:
        return PaymentMessage(
            kind="error",
            message=f"Payment cannot exceed remaining obligation of {format_currency(limits.maximum, currency_symbol)}",
        )

    if amount < limits.minimum:
        return PaymentMessage(
            kind="error",
            message=f"Minimum payment is {format_currency(limits.minimum, currency_symbol)}",
        )

    if amount == limits.installment_amount:
        return PaymentMessage(kind="success", message="Normal installment payment")

    if amount > limits.installment_amount:
        breakdown = compute_breakdown(amount, limits)
        if breakdown.cycles_covered == 0:
            advance = format_currency(breakdown.advance_amount, currency_symbol)
            return PaymentMessage(
                kind="info",
                message=f"Advance payment - {advance} will be credited toward the next cycle",
            )
        # The current cycle counts as one of the covered cycles
        cycles = breakdown.cycles_covered + 1
        return PaymentMessage(
            kind="info",
            message=f"Advance payment - covers {cycles} cycles including the current one",
        )

    # Due this cycle is capped by what is left on the whole obligation
    balance = format_currency(max(ZERO, limits.minimum - amount), currency_symbol)
    return PaymentMessage(
        kind="info",
        message=f"Partial payment - balance of {balance} will remain due for this cycle",
    )


def is_valid_payment_amount(
    payment_amount: Decimal,
    limits: PaymentLimits,
    currency_symbol: str = "₹",
) -> PaymentValidation:
    """Validate a payment against its limits; returns a result instead of raising"""
    amount = to_money(payment_amount)

    if amount <= 0:
        return PaymentValidation(
            is_valid=False,
            error="Payment amount must be greater than 0",
            code=INVALID_AMOUNT,
        )

    if amount > limits.maximum:
        return PaymentValidation(
            is_valid=False,
            error=f"Payment cannot exceed remaining obligation of {format_currency(limits.maximum, currency_symbol)}",
            code=INVALID_AMOUNT,
        )

    if amount < limits.minimum:
        return PaymentValidation(
            is_valid=False,
            error=f"Minimum payment is {format_currency(limits.minimum, currency_symbol)}",
            code=INVALID_AMOUNT,
        )

    return PaymentValidation(is_valid=True)
