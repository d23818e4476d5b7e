"""SQLAlchemy ORM models for the chit fund tables read and written by the engine"""

import uuid
from sqlalchemy import Column, Integer, Numeric, Date, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class ChitFundRecord(Base):
    """Chit fund terms and schedule configuration"""

    __tablename__ = "chit_funds"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    installment_per_member = Column(Numeric(12, 2), nullable=False)
    duration_months = Column(Integer, nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=True)
    start_date = Column(Date, nullable=True)
    cycle_interval_type = Column(Text, nullable=True, default="monthly")
    cycle_interval_value = Column(Integer, nullable=True, default=1)
    status = Column(Text, nullable=True, default="planning")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    cycles = relationship("CycleRecord", back_populates="chit_fund", cascade="all, delete-orphan")


class CycleRecord(Base):
    """Scheduled collection/payout period of a fund"""

    __tablename__ = "cycles"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    chit_fund_id = Column(Uuid(as_uuid=False), ForeignKey("chit_funds.id", ondelete="CASCADE"), nullable=False, index=True)
    cycle_number = Column(Integer, nullable=False)
    cycle_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(Text, nullable=False, default="upcoming")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    chit_fund = relationship("ChitFundRecord", back_populates="cycles")


class CollectionEntryRecord(Base):
    """Payment collected from a member, settled once its closing session is closed"""

    __tablename__ = "collection_entries"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    chit_fund_id = Column(Uuid(as_uuid=False), ForeignKey("chit_funds.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    cycle_id = Column(Uuid(as_uuid=False), ForeignKey("cycles.id", ondelete="SET NULL"), nullable=True)
    amount_collected = Column(Numeric(12, 2), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    collection_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
