"""Per-cycle payment bookkeeping - cycle status, allocation of payments and advance balances"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from chit_ledger.domain.models import (
    AdvanceApplication,
    Cycle,
    CycleAllocation,
    CyclePaymentStatus,
    Fund,
    MemberPaymentSummary,
    PaymentHistoryEntry,
)
from chit_ledger.utils.money import ZERO, to_money


def _status_for(amount_paid: Decimal, installment_amount: Decimal) -> str:
    if amount_paid <= 0:
        return "unpaid"
    if amount_paid >= installment_amount:
        return "fully_paid"
    return "partially_paid"


def cycle_payment_status(
    cycle: Cycle,
    installment_amount: Decimal,
    amount_paid: Decimal,
) -> CyclePaymentStatus:
    """Classify a member's position in one cycle as unpaid, partially_paid or fully_paid"""
    installment = to_money(installment_amount)
    paid = to_money(amount_paid)

    return CyclePaymentStatus(
        cycle_id=cycle.id,
        cycle_number=cycle.cycle_number,
        cycle_date=cycle.cycle_date,
        installment_amount=installment,
        amount_paid=paid,
        remaining_amount=max(ZERO, installment - paid),
        payment_status=_status_for(paid, installment),
    )


def member_cycle_statuses(
    fund: Fund,
    cycles: Iterable[Cycle],
    payments: Iterable[PaymentHistoryEntry],
) -> List[CyclePaymentStatus]:
    """Payment status of every cycle in the fund, ordered by cycle number"""
    paid_by_cycle: Dict[Optional[str], Decimal] = defaultdict(lambda: ZERO)
    for payment in payments:
        if payment.is_settled and payment.cycle_id is not None:
            paid_by_cycle[payment.cycle_id] += to_money(payment.amount_collected)

    return [
        cycle_payment_status(cycle, fund.installment_amount, paid_by_cycle[cycle.id])
        for cycle in sorted(cycles, key=lambda c: c.cycle_number)
    ]


def member_payment_summary(
    fund: Fund,
    cycles: Iterable[Cycle],
    payments: Iterable[PaymentHistoryEntry],
) -> MemberPaymentSummary:
    """Overall obligation, amount paid and cycle counts for one member"""
    payments = list(payments)
    statuses = member_cycle_statuses(fund, cycles, payments)

    total_obligation = to_money(fund.installment_amount) * fund.duration_cycles
    total_paid = to_money(sum((to_money(p.amount_collected) for p in payments if p.is_settled), ZERO))

    return MemberPaymentSummary(
        total_obligation=total_obligation,
        total_paid=total_paid,
        total_remaining=max(ZERO, total_obligation - total_paid),
        cycles_fully_paid=sum(1 for s in statuses if s.payment_status == "fully_paid"),
        cycles_partially_paid=sum(1 for s in statuses if s.payment_status == "partially_paid"),
        cycles_unpaid=sum(1 for s in statuses if s.payment_status == "unpaid"),
    )


def next_payable_cycle(
    statuses: Iterable[CyclePaymentStatus],
    after_cycle_number: Optional[int] = None,
) -> Optional[CyclePaymentStatus]:
    """First cycle not yet fully paid, optionally only after a given cycle"""
    for status in sorted(statuses, key=lambda s: s.cycle_number):
        if after_cycle_number is not None and status.cycle_number <= after_cycle_number:
            continue
        if not status.is_fully_paid:
            return status
    return None


def allocate_payment(
    payment_amount: Decimal,
    statuses: Iterable[CyclePaymentStatus],
) -> List[CycleAllocation]:
    """
    Spread a payment oldest-first across cycles that still have a balance.

    Partially paid cycles are topped up before later cycles are touched. The
    allocated total is min(payment_amount, sum of remaining balances); any
    excess is left unallocated.

    Example:
        installment 5000, cycle 1 paid 2000, payment 9000
        → cycle 1: 3000 (fully_paid), cycle 2: 5000 (fully_paid), cycle 3: 1000 (partially_paid)
    """
    left = to_money(payment_amount)
    allocations = []

    for status in sorted(statuses, key=lambda s: s.cycle_number):
        if left <= 0:
            break
        if status.remaining_amount <= 0:
            continue

        applied = min(left, status.remaining_amount)
        left -= applied
        paid_after = status.amount_paid + applied

        allocations.append(
            CycleAllocation(
                cycle_id=status.cycle_id,
                cycle_number=status.cycle_number,
                cycle_date=status.cycle_date,
                allocated_amount=applied,
                amount_paid_before=status.amount_paid,
                remaining_after=status.remaining_amount - applied,
                payment_status=_status_for(paid_after, status.installment_amount),
            )
        )

    return allocations


def apply_advance_balance(
    advance_balance: Decimal,
    installment_amount: Decimal,
    cycles_due: int,
) -> AdvanceApplication:
    """Use an advance balance to auto-pay whole installments for cycles falling due"""
    installment = to_money(installment_amount)
    if installment <= 0:
        raise ValueError("Installment amount must be greater than 0")

    balance = max(ZERO, to_money(advance_balance))
    cycles_auto_paid = min(max(0, cycles_due), int(balance // installment))
    applied = installment * cycles_auto_paid

    return AdvanceApplication(
        advance_applied=applied,
        cycles_auto_paid=cycles_auto_paid,
        new_advance_balance=balance - applied,
    )
