"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

SETTLED_STATUS = "closed"


class IntervalType(str, Enum):
    """Recurrence unit for a fund's cycle schedule"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM_DAYS = "custom_days"


@dataclass
class Fund:
    """Chit fund obligation terms for one member"""

    installment_amount: Decimal
    duration_cycles: int
    total_amount: Optional[Decimal] = None  # advisory, ~ installment x duration
    id: Optional[str] = None
    name: Optional[str] = None
    start_date: Optional[date] = None
    interval_type: str = IntervalType.MONTHLY.value
    interval_value: int = 1


@dataclass
class PaymentHistoryEntry:
    """Collection entry recorded against a member"""

    amount_collected: Decimal
    status: str = SETTLED_STATUS  # "pending" or "closed"
    cycle_id: Optional[str] = None
    member_id: Optional[str] = None

    @property
    def is_settled(self) -> bool:
        return self.status == SETTLED_STATUS


@dataclass
class PaymentLimits:
    """Derived payment bounds for a member in a fund"""

    minimum: Decimal
    maximum: Decimal
    recommended: Decimal
    total_obligation: Decimal
    total_paid: Decimal
    remaining_obligation: Decimal
    installment_amount: Decimal
    cycles_remaining: int
    total_cycles: int


@dataclass
class PaymentBreakdown:
    """How a single payment splits across the current cycle and advance"""

    current_cycle: Decimal
    advance_amount: Decimal
    cycles_covered: int
    remaining_after_payment: Decimal
    percentage_complete: Decimal


@dataclass
class PaymentMessage:
    """Advisory feedback for a candidate payment"""

    kind: str  # success | info | warning | error
    message: str


@dataclass
class PaymentValidation:
    """Outcome of payment amount validation"""

    is_valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


@dataclass
class CycleGenerationOptions:
    """Schedule parameters for a fund"""

    start_date: date | str
    total_cycles: int
    interval_type: str
    interval_value: int


@dataclass
class Cycle:
    """One scheduled collection/payout period of a fund"""

    chit_fund_id: Optional[str]  # None for unsaved schedule previews
    cycle_number: int
    cycle_date: date
    status: str  # "active" | "upcoming" at creation
    total_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    id: Optional[str] = None


@dataclass
class CycleConfigValidation:
    """Outcome of cycle configuration validation"""

    is_valid: bool
    error: Optional[str] = None


@dataclass
class CyclePaymentStatus:
    """A member's payment position within a single cycle"""

    cycle_id: Optional[str]
    cycle_number: int
    cycle_date: date
    installment_amount: Decimal
    amount_paid: Decimal
    remaining_amount: Decimal
    payment_status: str  # unpaid | partially_paid | fully_paid

    @property
    def is_fully_paid(self) -> bool:
        return self.payment_status == "fully_paid"


@dataclass
class CycleAllocation:
    """Portion of a payment applied to one cycle"""

    cycle_id: Optional[str]
    cycle_number: int
    cycle_date: date
    allocated_amount: Decimal
    amount_paid_before: Decimal
    remaining_after: Decimal
    payment_status: str


@dataclass
class MemberPaymentSummary:
    """Member's overall position across every cycle of a fund"""

    total_obligation: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    cycles_fully_paid: int
    cycles_partially_paid: int
    cycles_unpaid: int


@dataclass
class AdvanceApplication:
    """Result of applying an advance balance to due cycles"""

    advance_applied: Decimal
    cycles_auto_paid: int
    new_advance_balance: Decimal
