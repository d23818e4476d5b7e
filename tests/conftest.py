"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from chit_ledger.api.main import create_app
from chit_ledger.infrastructure.database.models import Base, ChitFundRecord, CycleRecord, CollectionEntryRecord
from chit_ledger.infrastructure.database.session import get_db
from chit_ledger.domain.models import Fund, PaymentHistoryEntry


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def fund() -> Fund:
    """12-cycle monthly fund with a 5000 installment"""
    return Fund(
        installment_amount=Decimal("5000"),
        duration_cycles=12,
        total_amount=Decimal("60000"),
    )


@pytest.fixture
def member_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def fund_record(db: Session) -> ChitFundRecord:
    """Persisted chit fund without cycles"""
    record = ChitFundRecord(
        name="Diwali Savings 2024",
        installment_per_member=Decimal("5000.00"),
        duration_months=12,
        total_amount=Decimal("60000.00"),
        start_date=date(2024, 1, 15),
        cycle_interval_type="monthly",
        cycle_interval_value=1,
    )
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def fund_with_cycles(db: Session, fund_record: ChitFundRecord) -> ChitFundRecord:
    """Persisted fund with its first three monthly cycles"""
    for number in range(1, 4):
        db.add(
            CycleRecord(
                chit_fund_id=fund_record.id,
                cycle_number=number,
                cycle_date=date(2024, number, 15),
                total_amount=Decimal("0.00"),
                status="active" if number == 1 else "upcoming",
            )
        )
    db.commit()
    return fund_record


@pytest.fixture
def add_collection(db: Session):
    """Insert collection entries for a member"""

    def _add(fund_id: str, member_id: str, amount: str, status: str = "closed", cycle_id: str | None = None):
        entry = CollectionEntryRecord(
            chit_fund_id=fund_id,
            member_id=member_id,
            cycle_id=cycle_id,
            amount_collected=Decimal(amount),
            status=status,
            collection_date=date(2024, 1, 20),
        )
        db.add(entry)
        db.commit()
        return entry

    return _add


@pytest.fixture
def settled():
    """Build settled payment history entries from amounts"""

    def _build(*amounts: str) -> list[PaymentHistoryEntry]:
        return [PaymentHistoryEntry(amount_collected=Decimal(a), status="closed") for a in amounts]

    return _build
