"""HTTP client for the hosted PostgREST (Supabase) fund store"""

import httpx
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from chit_ledger.domain.models import Fund, Cycle, PaymentHistoryEntry, SETTLED_STATUS
from chit_ledger.domain.exceptions import FundNotFoundError, StoreUnavailableError
from chit_ledger.utils.date_utils import parse_iso_date, to_iso_date
from chit_ledger.config import settings


class SupabaseStoreClient:
    """Fund store reached over the PostgREST API of the hosted database"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Prefer": "return=representation",
        }

    async def _request(self, method: str, table: str, **kwargs: Any) -> List[Dict[str, Any]]:
        """
        Issue one PostgREST call and return the decoded rows.

        Raises:
            StoreUnavailableError: On timeout, transport or HTTP errors, or a non-list body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}/rest/v1/{table}",
                    headers=self._headers(),
                    **kwargs,
                )
                response.raise_for_status()
                rows = response.json()

            except httpx.TimeoutException as e:
                raise StoreUnavailableError(f"Store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise StoreUnavailableError(f"Store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise StoreUnavailableError(f"Store unreachable: {e}") from e
            except ValueError as e:
                raise StoreUnavailableError(f"Invalid response from store: {e}") from e

        if not isinstance(rows, list):
            raise StoreUnavailableError(f"Expected a list of rows from store, got {type(rows).__name__}")
        return rows

    async def get_fund(self, fund_id: str) -> Fund:
        rows = await self._request(
            "GET",
            "chit_funds",
            params={
                "id": f"eq.{fund_id}",
                "select": "id,name,installment_per_member,duration_months,total_amount,"
                "start_date,cycle_interval_type,cycle_interval_value",
            },
        )
        if not rows:
            raise FundNotFoundError(fund_id)

        row = rows[0]
        try:
            return Fund(
                id=row["id"],
                name=row.get("name"),
                installment_amount=Decimal(str(row["installment_per_member"])),
                duration_cycles=int(row["duration_months"]),
                total_amount=Decimal(str(row["total_amount"])) if row.get("total_amount") is not None else None,
                start_date=parse_iso_date(row["start_date"]) if row.get("start_date") else None,
                interval_type=row.get("cycle_interval_type") or "monthly",
                interval_value=row.get("cycle_interval_value") or 1,
            )
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise StoreUnavailableError(f"Invalid chit fund data from store: {e}") from e

    async def get_settled_payments(self, fund_id: str, member_id: str) -> List[PaymentHistoryEntry]:
        rows = await self._request(
            "GET",
            "collection_entries",
            params={
                "chit_fund_id": f"eq.{fund_id}",
                "member_id": f"eq.{member_id}",
                "status": f"eq.{SETTLED_STATUS}",
                "select": "amount_collected,status,cycle_id,member_id",
            },
        )
        try:
            return [
                PaymentHistoryEntry(
                    amount_collected=Decimal(str(row["amount_collected"])),
                    status=row["status"],
                    cycle_id=row.get("cycle_id"),
                    member_id=row.get("member_id"),
                )
                for row in rows
            ]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise StoreUnavailableError(f"Invalid payment data from store: {e}") from e

    async def get_cycles(self, fund_id: str) -> List[Cycle]:
        rows = await self._request(
            "GET",
            "cycles",
            params={
                "chit_fund_id": f"eq.{fund_id}",
                "select": "id,chit_fund_id,cycle_number,cycle_date,total_amount,status",
                "order": "cycle_number.asc",
            },
        )
        return self._parse_cycles(rows)

    async def insert_cycles(self, cycles: Sequence[Cycle]) -> List[Cycle]:
        payload = [
            {
                "chit_fund_id": cycle.chit_fund_id,
                "cycle_number": cycle.cycle_number,
                "cycle_date": to_iso_date(cycle.cycle_date),
                "total_amount": str(cycle.total_amount),
                "status": cycle.status,
            }
            for cycle in cycles
        ]
        rows = await self._request("POST", "cycles", json=payload)
        return self._parse_cycles(rows)

    @staticmethod
    def _parse_cycles(rows: List[Dict[str, Any]]) -> List[Cycle]:
        try:
            return [
                Cycle(
                    id=row.get("id"),
                    chit_fund_id=row["chit_fund_id"],
                    cycle_number=int(row["cycle_number"]),
                    cycle_date=parse_iso_date(row["cycle_date"]),
                    status=row["status"],
                    total_amount=Decimal(str(row.get("total_amount") or 0)),
                )
                for row in rows
            ]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise StoreUnavailableError(f"Invalid cycle data from store: {e}") from e
