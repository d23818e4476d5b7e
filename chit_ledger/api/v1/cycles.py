"""Cycle schedule endpoints - generation, listing, previews and interval presets"""

import time
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from chit_ledger.api.v1.schemas import (
    CycleScheduleRequest,
    CycleScheduleResponse,
    CycleListResponse,
    CycleSchema,
    IntervalOptionsResponse,
)
from chit_ledger.api.dependencies import ChitFundStore, get_store, get_request_id
from chit_ledger.domain.models import Cycle, CycleGenerationOptions
from chit_ledger.domain.cycles import (
    generate_cycles,
    calculate_end_date,
    calculate_total_duration,
    validate_cycle_configuration,
    get_interval_description,
    INTERVAL_TYPE_OPTIONS,
    COMMON_INTERVALS,
    MAX_INTERVAL_VALUE,
)
from chit_ledger.domain.exceptions import DataUnavailableError, FundNotFoundError
from chit_ledger.infrastructure.observability.metrics import (
    record_cycles_generated,
    cycle_config_rejected_counter,
    store_failures_counter,
)
from chit_ledger.infrastructure.observability.logging import log_cycles_generated

router = APIRouter()


def _validate_schedule(body: CycleScheduleRequest, request_id: str) -> None:
    """Reject a bad configuration before anything is generated or written"""
    result = validate_cycle_configuration(
        body.interval_type, body.interval_value, body.total_cycles, start_date=body.start_date
    )
    if not result.is_valid:
        cycle_config_rejected_counter.inc()
        logging.warning(f"Rejected cycle configuration: {result.error}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=result.error)


def _schedule_response(fund_id: str | None, body: CycleScheduleRequest, cycles: List[Cycle]) -> CycleScheduleResponse:
    return CycleScheduleResponse(
        fund_id=fund_id,
        description=get_interval_description(body.interval_type, body.interval_value, body.total_cycles),
        end_date=calculate_end_date(body.start_date, body.total_cycles, body.interval_type, body.interval_value),
        total_duration_days=calculate_total_duration(body.total_cycles, body.interval_type, body.interval_value),
        cycles=[CycleSchema.model_validate(c) for c in cycles],
    )


@router.post("/funds/{fund_id}/cycles", response_model=CycleScheduleResponse, status_code=201)
async def create_fund_cycles(
    fund_id: str,
    request_body: CycleScheduleRequest,
    request: Request,
    store: ChitFundStore = Depends(get_store),
):
    """
    Materialize a fund's cycle schedule.

    Flow:
    1. Validate the interval configuration
    2. Confirm the fund exists and has no cycles yet
    3. Generate cycles (first active, rest upcoming)
    4. Insert all cycles in one write
    """
    try:
        uuid.UUID(fund_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid fund ID format")

    start_time = time.time()
    request_id = get_request_id(request)
    _validate_schedule(request_body, request_id)

    try:
        await store.get_fund(fund_id)
        if await store.get_cycles(fund_id):
            raise HTTPException(status_code=409, detail="Cycles already generated for this fund")

        options = CycleGenerationOptions(
            start_date=request_body.start_date,
            total_cycles=request_body.total_cycles,
            interval_type=request_body.interval_type,
            interval_value=request_body.interval_value,
        )
        saved = await store.insert_cycles(generate_cycles(fund_id, options))

    except FundNotFoundError as e:
        logging.warning(f"Fund not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Chit fund not found")

    except DataUnavailableError as e:
        store_failures_counter.inc()
        logging.error(f"Store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Fund store unavailable")

    duration_ms = (time.time() - start_time) * 1000
    record_cycles_generated(request_body.interval_type, len(saved))
    log_cycles_generated(request_id, fund_id, request_body.interval_type, len(saved), duration_ms)

    return _schedule_response(fund_id, request_body, saved)


@router.get("/funds/{fund_id}/cycles", response_model=CycleListResponse)
async def list_fund_cycles(
    fund_id: str,
    request: Request,
    store: ChitFundStore = Depends(get_store),
):
    """Stored cycles of a fund, ordered by cycle number"""
    try:
        uuid.UUID(fund_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid fund ID format")

    request_id = get_request_id(request)

    try:
        await store.get_fund(fund_id)
        cycles = await store.get_cycles(fund_id)

    except FundNotFoundError:
        raise HTTPException(status_code=404, detail="Chit fund not found")

    except DataUnavailableError as e:
        store_failures_counter.inc()
        logging.error(f"Store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Fund store unavailable")

    return CycleListResponse(
        fund_id=fund_id,
        cycles=[CycleSchema.model_validate(c) for c in sorted(cycles, key=lambda c: c.cycle_number)],
    )


@router.post("/cycles/preview", response_model=CycleScheduleResponse)
def preview_cycles(request_body: CycleScheduleRequest, request: Request):
    """Generate a schedule without persisting it, for fund creation forms"""
    _validate_schedule(request_body, get_request_id(request))

    options = CycleGenerationOptions(
        start_date=request_body.start_date,
        total_cycles=request_body.total_cycles,
        interval_type=request_body.interval_type,
        interval_value=request_body.interval_value,
    )
    return _schedule_response(None, request_body, generate_cycles(None, options))


@router.get("/cycles/intervals", response_model=IntervalOptionsResponse)
def get_interval_options():
    """Interval types, common presets and per-type limits"""
    return IntervalOptionsResponse(
        interval_types=INTERVAL_TYPE_OPTIONS,
        presets=COMMON_INTERVALS,
        max_interval_value={kind.value: limit for kind, limit in MAX_INTERVAL_VALUE.items()},
    )
