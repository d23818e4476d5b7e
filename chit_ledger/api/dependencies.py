"""Dependency injection for FastAPI endpoints"""

from typing import List, Protocol, Sequence
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from chit_ledger.config import settings
from chit_ledger.domain.models import Fund, Cycle, PaymentHistoryEntry
from chit_ledger.infrastructure.database.session import get_db
from chit_ledger.infrastructure.database.repositories import SqlChitFundStore
from chit_ledger.infrastructure.clients.supabase import SupabaseStoreClient


class ChitFundStore(Protocol):
    """Read/write operations the engine needs from the fund store"""

    async def get_fund(self, fund_id: str) -> Fund: ...

    async def get_settled_payments(self, fund_id: str, member_id: str) -> List[PaymentHistoryEntry]: ...

    async def get_cycles(self, fund_id: str) -> List[Cycle]: ...

    async def insert_cycles(self, cycles: Sequence[Cycle]) -> List[Cycle]: ...


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> ChitFundStore:
    """Provide the configured fund store (SQL session or hosted REST API)"""
    if settings.store_backend == "supabase":
        return SupabaseStoreClient()
    return SqlChitFundStore(db)
