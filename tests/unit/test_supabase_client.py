"""Unit tests for the hosted store HTTP client"""

import asyncio
import json
import httpx
import pytest
from datetime import date
from decimal import Decimal
from chit_ledger.domain.models import Cycle
from chit_ledger.domain.exceptions import FundNotFoundError, StoreUnavailableError
from chit_ledger.infrastructure.clients.supabase import SupabaseStoreClient

FUND_ID = "6f1c2a8e-3b7d-4c55-9a41-0e2d8f7b9c10"
MEMBER_ID = "0b7e9a54-22c1-4f0e-8d6b-7c3a1e5f9d22"


def _client(handler) -> SupabaseStoreClient:
    return SupabaseStoreClient(
        base_url="https://store.example.test",
        api_key="test-key",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_get_fund_parses_row():
    """Test fund rows map onto domain funds"""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["id"] = request.url.params["id"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(
            200,
            json=[
                {
                    "id": FUND_ID,
                    "name": "Diwali Savings 2024",
                    "installment_per_member": 5000,
                    "duration_months": 12,
                    "total_amount": 60000,
                    "start_date": "2024-01-15",
                    "cycle_interval_type": "weekly",
                    "cycle_interval_value": 2,
                }
            ],
        )

    fund = asyncio.run(_client(handler).get_fund(FUND_ID))

    assert seen == {"path": "/rest/v1/chit_funds", "id": f"eq.{FUND_ID}", "apikey": "test-key"}
    assert fund.installment_amount == Decimal("5000")
    assert fund.duration_cycles == 12
    assert fund.start_date == date(2024, 1, 15)
    assert fund.interval_type == "weekly"
    assert fund.interval_value == 2


def test_get_fund_missing():
    """Test an empty result is reported as a missing fund"""
    client = _client(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(FundNotFoundError):
        asyncio.run(client.get_fund(FUND_ID))


def test_get_settled_payments_filters_closed():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["status"] == "eq.closed"
        assert request.url.params["member_id"] == f"eq.{MEMBER_ID}"
        return httpx.Response(
            200,
            json=[
                {"amount_collected": "5000.00", "status": "closed", "cycle_id": "c1", "member_id": MEMBER_ID},
                {"amount_collected": 2500.5, "status": "closed", "cycle_id": None, "member_id": MEMBER_ID},
            ],
        )

    payments = asyncio.run(_client(handler).get_settled_payments(FUND_ID, MEMBER_ID))

    assert [p.amount_collected for p in payments] == [Decimal("5000.00"), Decimal("2500.5")]
    assert all(p.is_settled for p in payments)


def test_insert_cycles_posts_iso_dates():
    """Test cycles are written with ISO dates and read back with ids"""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        rows = [dict(row, id=f"id-{row['cycle_number']}") for row in captured["body"]]
        return httpx.Response(201, json=rows)

    cycles = [
        Cycle(chit_fund_id=FUND_ID, cycle_number=1, cycle_date=date(2024, 1, 31), status="active"),
        Cycle(chit_fund_id=FUND_ID, cycle_number=2, cycle_date=date(2024, 2, 29), status="upcoming"),
    ]
    saved = asyncio.run(_client(handler).insert_cycles(cycles))

    assert captured["method"] == "POST"
    assert [row["cycle_date"] for row in captured["body"]] == ["2024-01-31", "2024-02-29"]
    assert [row["total_amount"] for row in captured["body"]] == ["0.00", "0.00"]
    assert [c.id for c in saved] == ["id-1", "id-2"]
    assert saved[1].cycle_date == date(2024, 2, 29)


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500, json={"message": "boom"}),
        lambda request: httpx.Response(200, content=b"not json"),
        lambda request: httpx.Response(200, json=[{"id": FUND_ID}]),
        lambda request: httpx.Response(200, json={"id": FUND_ID}),
    ],
)
def test_store_failures_raise_store_unavailable(handler):
    """Test HTTP errors, non-list bodies and malformed rows surface as StoreUnavailableError"""
    with pytest.raises(StoreUnavailableError):
        asyncio.run(_client(handler).get_fund(FUND_ID))


def test_timeout_raises_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(StoreUnavailableError, match="timeout"):
        asyncio.run(_client(handler).get_cycles(FUND_ID))
