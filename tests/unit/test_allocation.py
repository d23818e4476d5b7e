"""Unit tests for per-cycle payment bookkeeping"""

import pytest
from datetime import date
from decimal import Decimal
from chit_ledger.domain.models import Cycle, Fund, PaymentHistoryEntry
from chit_ledger.domain.allocation import (
    cycle_payment_status,
    member_cycle_statuses,
    member_payment_summary,
    next_payable_cycle,
    allocate_payment,
    apply_advance_balance,
)


@pytest.fixture
def cycles() -> list[Cycle]:
    """Four monthly cycles, deliberately out of order"""
    return [
        Cycle(id=f"c{n}", chit_fund_id="f1", cycle_number=n, cycle_date=date(2024, n, 15), status="upcoming")
        for n in (3, 1, 4, 2)
    ]


def _paid(cycle_id: str, amount: str, status: str = "closed") -> PaymentHistoryEntry:
    return PaymentHistoryEntry(amount_collected=Decimal(amount), status=status, cycle_id=cycle_id)


@pytest.mark.parametrize(
    "paid,expected_status,expected_remaining",
    [("0", "unpaid", "5000"), ("1200", "partially_paid", "3800"), ("5000", "fully_paid", "0"), ("6000", "fully_paid", "0")],
)
def test_cycle_payment_status(cycles, paid, expected_status, expected_remaining):
    status = cycle_payment_status(cycles[0], Decimal("5000"), Decimal(paid))

    assert status.payment_status == expected_status
    assert status.remaining_amount == Decimal(expected_remaining)
    assert status.is_fully_paid is (expected_status == "fully_paid")


def test_member_cycle_statuses_orders_and_sums(fund: Fund, cycles):
    """Test statuses are ordered by cycle number and only settled payments count"""
    payments = [
        _paid("c1", "3000"),
        _paid("c1", "2000"),
        _paid("c2", "1000"),
        _paid("c3", "5000", status="pending"),
    ]
    statuses = member_cycle_statuses(fund, cycles, payments)

    assert [s.cycle_number for s in statuses] == [1, 2, 3, 4]
    assert [s.payment_status for s in statuses] == ["fully_paid", "partially_paid", "unpaid", "unpaid"]
    assert statuses[0].amount_paid == Decimal("5000")


def test_member_payment_summary(fund: Fund, cycles):
    summary = member_payment_summary(fund, cycles, [_paid("c1", "5000"), _paid("c2", "1000")])

    assert summary.total_obligation == Decimal("60000")
    assert summary.total_paid == Decimal("6000")
    assert summary.total_remaining == Decimal("54000")
    assert (summary.cycles_fully_paid, summary.cycles_partially_paid, summary.cycles_unpaid) == (1, 1, 2)


def test_next_payable_cycle(fund: Fund, cycles):
    """Test the first unpaid cycle is returned, optionally after a given cycle"""
    statuses = member_cycle_statuses(fund, cycles, [_paid("c1", "5000"), _paid("c3", "5000")])

    assert next_payable_cycle(statuses).cycle_number == 2
    assert next_payable_cycle(statuses, after_cycle_number=2).cycle_number == 4


def test_next_payable_cycle_all_paid(fund: Fund, cycles):
    statuses = member_cycle_statuses(fund, cycles, [_paid(f"c{n}", "5000") for n in range(1, 5)])

    assert next_payable_cycle(statuses) is None


def test_allocate_payment_tops_up_oldest_first(fund: Fund, cycles):
    """Test a partially paid cycle is completed before later cycles"""
    statuses = member_cycle_statuses(fund, cycles, [_paid("c1", "2000")])
    allocations = allocate_payment(Decimal("9000"), statuses)

    assert [(a.cycle_number, a.allocated_amount, a.payment_status) for a in allocations] == [
        (1, Decimal("3000"), "fully_paid"),
        (2, Decimal("5000"), "fully_paid"),
        (3, Decimal("1000"), "partially_paid"),
    ]
    assert allocations[0].amount_paid_before == Decimal("2000")
    assert allocations[2].remaining_after == Decimal("4000")
    assert sum(a.allocated_amount for a in allocations) == Decimal("9000")


def test_allocate_payment_skips_paid_cycles(fund: Fund, cycles):
    statuses = member_cycle_statuses(fund, cycles, [_paid("c1", "5000"), _paid("c2", "5000")])
    allocations = allocate_payment(Decimal("5000"), statuses)

    assert [a.cycle_number for a in allocations] == [3]


def test_allocate_payment_caps_at_remaining(fund: Fund, cycles):
    """Test a payment larger than all remaining balances leaves the excess unallocated"""
    statuses = member_cycle_statuses(fund, cycles, [])
    allocations = allocate_payment(Decimal("25000"), statuses)

    assert len(allocations) == 4
    assert sum(a.allocated_amount for a in allocations) == Decimal("20000")


def test_apply_advance_balance():
    """Test whole installments are auto-paid from the advance balance"""
    result = apply_advance_balance(Decimal("11000"), Decimal("5000"), cycles_due=3)

    assert result.cycles_auto_paid == 2
    assert result.advance_applied == Decimal("10000")
    assert result.new_advance_balance == Decimal("1000")


def test_apply_advance_balance_limited_by_due_cycles():
    result = apply_advance_balance(Decimal("20000"), Decimal("5000"), cycles_due=1)

    assert result.cycles_auto_paid == 1
    assert result.new_advance_balance == Decimal("15000")


def test_apply_advance_balance_insufficient():
    result = apply_advance_balance(Decimal("4999.99"), Decimal("5000"), cycles_due=2)

    assert result.cycles_auto_paid == 0
    assert result.advance_applied == Decimal("0")
    assert result.new_advance_balance == Decimal("4999.99")


def test_apply_advance_balance_rejects_zero_installment():
    with pytest.raises(ValueError):
        apply_advance_balance(Decimal("100"), Decimal("0"), cycles_due=1)
