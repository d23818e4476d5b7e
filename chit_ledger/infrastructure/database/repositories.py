"""Data access layer for chit fund entities"""

import logging
from decimal import Decimal
from typing import List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from chit_ledger.infrastructure.database.models import ChitFundRecord, CycleRecord, CollectionEntryRecord
from chit_ledger.domain.models import Fund, Cycle, PaymentHistoryEntry, SETTLED_STATUS
from chit_ledger.domain.exceptions import FundNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)


class FundRepository:
    """Repository for chit funds"""

    def __init__(self, db: Session):
        self.db = db

    def get_fund_by_id(self, fund_id: str) -> Optional[ChitFundRecord]:
        return self.db.query(ChitFundRecord).filter(ChitFundRecord.id == fund_id).first()


class CycleRepository:
    """Repository for fund cycles"""

    def __init__(self, db: Session):
        self.db = db

    def get_cycles_by_fund(self, fund_id: str) -> List[CycleRecord]:
        return (
            self.db.query(CycleRecord)
            .filter(CycleRecord.chit_fund_id == fund_id)
            .order_by(CycleRecord.cycle_number)
            .all()
        )

    def create_cycles(self, cycles: Sequence[Cycle]) -> List[CycleRecord]:
        """Stage cycle rows and flush to assign ids (caller commits)"""
        records = [
            CycleRecord(
                chit_fund_id=cycle.chit_fund_id,
                cycle_number=cycle.cycle_number,
                cycle_date=cycle.cycle_date,
                total_amount=cycle.total_amount,
                status=cycle.status,
            )
            for cycle in cycles
        ]
        self.db.add_all(records)
        self.db.flush()
        return records


class CollectionRepository:
    """Repository for member collection entries"""

    def __init__(self, db: Session):
        self.db = db

    def get_settled_by_member(self, fund_id: str, member_id: str) -> List[CollectionEntryRecord]:
        return (
            self.db.query(CollectionEntryRecord)
            .filter(
                CollectionEntryRecord.chit_fund_id == fund_id,
                CollectionEntryRecord.member_id == member_id,
                CollectionEntryRecord.status == SETTLED_STATUS,
            )
            .all()
        )


def _to_fund(record: ChitFundRecord) -> Fund:
    return Fund(
        id=str(record.id),
        name=record.name,
        installment_amount=Decimal(record.installment_per_member),
        duration_cycles=record.duration_months,
        total_amount=Decimal(record.total_amount) if record.total_amount is not None else None,
        start_date=record.start_date,
        interval_type=record.cycle_interval_type or "monthly",
        interval_value=record.cycle_interval_value or 1,
    )


def _to_cycle(record: CycleRecord) -> Cycle:
    return Cycle(
        id=str(record.id),
        chit_fund_id=str(record.chit_fund_id),
        cycle_number=record.cycle_number,
        cycle_date=record.cycle_date,
        status=record.status,
        total_amount=Decimal(record.total_amount or 0),
    )


class SqlChitFundStore:
    """
    Fund store backed by the SQLAlchemy session.

    Database errors surface as StoreUnavailableError so callers see the same
    failure regardless of backend.
    """

    def __init__(self, db: Session):
        self.db = db
        self.funds = FundRepository(db)
        self.cycles = CycleRepository(db)
        self.collections = CollectionRepository(db)

    async def get_fund(self, fund_id: str) -> Fund:
        try:
            record = self.funds.get_fund_by_id(fund_id)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to read chit fund {fund_id}") from e

        if record is None:
            raise FundNotFoundError(fund_id)
        return _to_fund(record)

    async def get_settled_payments(self, fund_id: str, member_id: str) -> List[PaymentHistoryEntry]:
        try:
            records = self.collections.get_settled_by_member(fund_id, member_id)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to read payments for member {member_id}") from e

        return [
            PaymentHistoryEntry(
                amount_collected=Decimal(r.amount_collected),
                status=r.status,
                cycle_id=str(r.cycle_id) if r.cycle_id else None,
                member_id=str(r.member_id),
            )
            for r in records
        ]

    async def get_cycles(self, fund_id: str) -> List[Cycle]:
        try:
            records = self.cycles.get_cycles_by_fund(fund_id)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to read cycles for fund {fund_id}") from e

        return [_to_cycle(r) for r in records]

    async def insert_cycles(self, cycles: Sequence[Cycle]) -> List[Cycle]:
        """Insert a generated schedule in one transaction"""
        try:
            records = self.cycles.create_cycles(cycles)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Cycle insert rolled back", extra={"cycle_count": len(cycles)})
            raise StoreUnavailableError("Failed to insert cycles") from e

        return [_to_cycle(r) for r in records]
