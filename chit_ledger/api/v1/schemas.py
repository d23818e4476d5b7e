"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PaymentPreviewRequest(BaseModel):
    """Request body for POST /v1/funds/{fund_id}/members/{member_id}/payment-preview"""

    payment_amount: Decimal = Field(..., gt=0, decimal_places=2, description="Candidate payment amount")


class CycleScheduleRequest(BaseModel):
    """Request body for cycle generation and schedule previews"""

    start_date: date
    total_cycles: int = Field(..., description="Number of cycles in the fund")
    interval_type: str = Field("monthly", description="weekly | monthly | custom_days")
    interval_value: int = Field(1, description="Weeks, months or days between cycles")


class PaymentLimitsSchema(BaseModel):
    """Payment bounds for a member"""

    model_config = ConfigDict(from_attributes=True)

    minimum: Decimal
    maximum: Decimal
    recommended: Decimal
    total_obligation: Decimal
    total_paid: Decimal
    remaining_obligation: Decimal
    installment_amount: Decimal
    cycles_remaining: int
    total_cycles: int


class PaymentBreakdownSchema(BaseModel):
    """Current cycle vs advance split of a payment"""

    model_config = ConfigDict(from_attributes=True)

    current_cycle: Decimal
    advance_amount: Decimal
    cycles_covered: int
    remaining_after_payment: Decimal
    percentage_complete: Decimal


class PaymentMessageSchema(BaseModel):
    """Advisory classification of a payment"""

    model_config = ConfigDict(from_attributes=True)

    kind: str
    message: str


class PaymentValidationSchema(BaseModel):
    """Validation outcome of a payment amount"""

    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


class CycleAllocationSchema(BaseModel):
    """Portion of a payment applied to one cycle"""

    model_config = ConfigDict(from_attributes=True)

    cycle_id: Optional[str] = None
    cycle_number: int
    cycle_date: date
    allocated_amount: Decimal
    amount_paid_before: Decimal
    remaining_after: Decimal
    payment_status: str


class CyclePaymentStatusSchema(BaseModel):
    """Member's payment position in one cycle"""

    model_config = ConfigDict(from_attributes=True)

    cycle_id: Optional[str] = None
    cycle_number: int
    cycle_date: date
    amount_paid: Decimal
    remaining_amount: Decimal
    payment_status: str


class MemberPaymentSummarySchema(BaseModel):
    """Member's position across the whole fund"""

    model_config = ConfigDict(from_attributes=True)

    total_obligation: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    cycles_fully_paid: int
    cycles_partially_paid: int
    cycles_unpaid: int


class AdvanceApplicationSchema(BaseModel):
    """How the advance portion of a payment auto-pays future cycles"""

    model_config = ConfigDict(from_attributes=True)

    advance_applied: Decimal
    cycles_auto_paid: int
    new_advance_balance: Decimal


class PaymentPreviewResponse(BaseModel):
    """Response for POST /v1/funds/{fund_id}/members/{member_id}/payment-preview"""

    fund_id: str
    member_id: str
    payment_amount: Decimal
    limits: PaymentLimitsSchema
    breakdown: PaymentBreakdownSchema
    message: PaymentMessageSchema
    validation: PaymentValidationSchema
    summary: MemberPaymentSummarySchema
    allocations: List[CycleAllocationSchema]
    advance: AdvanceApplicationSchema
    next_payable_cycle: Optional[CyclePaymentStatusSchema] = None


class CycleSchema(BaseModel):
    """Single cycle in a fund schedule"""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    chit_fund_id: Optional[str] = None
    cycle_number: int
    cycle_date: date
    status: str
    total_amount: Decimal


class CycleScheduleResponse(BaseModel):
    """Response for cycle generation and schedule previews"""

    fund_id: Optional[str] = None
    description: str
    end_date: date
    total_duration_days: int
    cycles: List[CycleSchema]


class CycleListResponse(BaseModel):
    """Response for GET /v1/funds/{fund_id}/cycles"""

    fund_id: str
    cycles: List[CycleSchema]


class IntervalOption(BaseModel):
    """Selectable interval type or preset"""

    value: str | int
    label: str
    description: str


class IntervalOptionsResponse(BaseModel):
    """Response for GET /v1/cycles/intervals"""

    interval_types: List[IntervalOption]
    presets: Dict[str, List[IntervalOption]]
    max_interval_value: Dict[str, int]
