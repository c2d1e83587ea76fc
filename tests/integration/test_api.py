"""Integration tests for API endpoints"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from welile_hub.api.dependencies import get_draft_store
from welile_hub.domain.drafts import InMemoryDraftStore

TODAY = date(2026, 3, 15)


@pytest.fixture
def portfolio_payload():
    """Two tenants: one with three missed installments, one fully paid"""
    payments = []
    for i in range(10):
        due = TODAY - timedelta(days=10 - i)
        paid = i < 7
        payments.append(
            {
                "tenant_id": "tenant-1",
                "date": due.isoformat(),
                "amount_due": 11292,
                "paid": paid,
                "paid_amount": 11292 if paid else None,
            }
        )
    for i in range(5):
        due = TODAY - timedelta(days=5 - i)
        payments.append(
            {"tenant_id": "tenant-2", "date": due.isoformat(), "amount_due": 22583, "paid": True, "paid_amount": 22583}
        )

    return {
        "today": TODAY.isoformat(),
        "tenants": [
            {
                "id": "tenant-1",
                "rent_amount": 500000,
                "repayment_days": 60,
                "status": "active",
                "agent_name": "Agnes",
                "registration_fee": 12500,
                "created_at": "2026-01-10T09:30:00",
            },
            {
                "id": "tenant-2",
                "rent_amount": 500000,
                "repayment_days": 30,
                "status": "active",
                "agent_name": "Brian",
                "registration_fee": 12500,
                "created_at": "2026-03-14T11:00:00Z",
            },
        ],
        "payments": payments,
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/repayment/quote", json={"rent_amount": 500000, "repayment_days": 60})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "welile_repayment_quotes_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_quote_endpoint(client: TestClient):
    """Test POST /v1/repayment/quote"""
    response = client.post("/v1/repayment/quote", json={"rent_amount": 500000, "repayment_days": 60})

    assert response.status_code == 200
    data = response.json()
    assert data["registration_fee"] == 12500
    assert data["access_fees"] == 165000
    assert data["total_amount"] == 677500
    assert data["daily_installment"] == 11292


def test_quote_endpoint_pipeline(client: TestClient):
    response = client.post(
        "/v1/repayment/quote",
        json={"rent_amount": 300000, "repayment_days": 30, "status": "Pipeline"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["registration_fee"] == 0
    assert data["access_fees"] == 0
    assert data["total_amount"] == 300000
    assert data["daily_installment"] == 10000


@pytest.mark.parametrize(
    "body",
    [
        {"rent_amount": 500000, "repayment_days": 45},
        {"rent_amount": 0, "repayment_days": 60},
        {"rent_amount": -100, "repayment_days": 30},
        {"rent_amount": "lots", "repayment_days": 30},
        {"repayment_days": 30},
    ],
)
def test_quote_endpoint_rejects_invalid_input(client: TestClient, body):
    response = client.post("/v1/repayment/quote", json=body)

    assert response.status_code == 422


def test_schedule_endpoint(client: TestClient):
    """Test POST /v1/repayment/schedule"""
    response = client.post(
        "/v1/repayment/schedule",
        json={"rent_amount": 500000, "repayment_days": 60, "start_date": "2026-01-31"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["details"]["total_amount"] == 677500
    installments = data["installments"]
    assert len(installments) == 60
    assert installments[0] == {
        "sequence_index": 1,
        "due_date": "2026-01-31",
        "amount_due": 11292,
        "paid": False,
        "paid_amount": 0,
    }
    assert installments[-1]["due_date"] == "2026-03-31"


def test_portfolio_summary_endpoint(client: TestClient, portfolio_payload):
    response = client.post("/v1/portfolio/summary", json=portfolio_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["number_of_tenants"] == 2
    assert data["manual_tenants"] == 2
    assert data["total_rent_paid"] == 7 * 11292 + 5 * 22583
    assert data["overdue_payments"] == 3 * 11292
    assert data["outstanding_balance"] == 3 * 11292
    assert data["tenants_at_risk"] == 1
    assert data["default_rate"] == pytest.approx(50.0)


def test_portfolio_risk_endpoint(client: TestClient, portfolio_payload):
    response = client.post("/v1/portfolio/risk", json=portfolio_payload)

    assert response.status_code == 200
    data = response.json()
    assert [t["tenant_id"] for t in data["tenants"]] == ["tenant-1", "tenant-2"]

    risky = data["tenants"][0]
    assert risky["score"] == 40
    assert risky["level"] == "medium"
    assert risky["missed_count"] == 3
    assert risky["at_risk"] is True
    assert risky["recommended_actions"] == [
        "Weekly reminder calls needed",
        "Monitor payment patterns closely",
        "Consider legal notice if no response",
    ]
    assert data["tenants"][1]["score"] == 0
    assert data["distribution"] == {"high": 0, "medium": 1, "low": 1}


def test_portfolio_agents_endpoint(client: TestClient, portfolio_payload):
    response = client.post("/v1/portfolio/agents", json=portfolio_payload)

    assert response.status_code == 200
    data = response.json()
    assert [a["agent_name"] for a in data] == ["Brian", "Agnes"]
    assert data[0]["collection_rate"] == pytest.approx(100.0)
    assert data[1]["collection_rate"] == pytest.approx(70.0)


def test_portfolio_trends_endpoint(client: TestClient, portfolio_payload):
    response = client.post("/v1/portfolio/trends", json={**portfolio_payload, "days": 7})

    assert response.status_code == 200
    data = response.json()
    assert len(data["payment_trend"]) == 7
    assert data["payment_trend"][-1]["date"] == "2026-03-15"
    # 2026-03-11: last day both tenants paid
    assert data["payment_trend"][-5]["date"] == "2026-03-11"
    assert data["payment_trend"][-5]["paid"] == 11292 + 22583
    assert data["payment_trend"][-2]["paid"] == 22583
    assert data["payment_trend"][-2]["expected"] == 11292 + 22583
    assert data["tenant_trend"][-2] == {"date": "2026-03-14", "active": 1, "pipeline": 0}
    assert data["status_distribution"] == {"active": 2}


def test_portfolio_endpoints_accept_empty_snapshot(client: TestClient):
    summary = client.post("/v1/portfolio/summary", json={})
    risk = client.post("/v1/portfolio/risk", json={})

    assert summary.status_code == 200
    assert summary.json()["collection_rate"] == 0
    assert risk.json() == {"tenants": [], "distribution": {"high": 0, "medium": 0, "low": 0}}


def test_achievement_check_endpoint(client: TestClient):
    response = client.post(
        "/v1/achievements/check",
        json={
            "user_identifier": "agent@welile.com",
            "action": "tenant_added",
            "tenants_added": 10,
            "already_earned": ["First Steps"],
        },
    )

    assert response.status_code == 200
    assert response.json() == {"user_identifier": "agent@welile.com", "new_badges": ["Team Builder"]}


def test_achievement_check_night_owl(client: TestClient):
    response = client.post(
        "/v1/achievements/check",
        json={
            "user_identifier": "agent@welile.com",
            "action": "payment_recorded",
            "payments_recorded": 40,
            "recordings": 12,
            "metadata": {"recorded_at": "2026-03-15T22:10:00"},
            "already_earned": ["Payment Pro"],
        },
    )

    assert response.json()["new_badges"] == ["Night Owl"]


def test_leaderboard_endpoint(client: TestClient):
    response = client.post(
        "/v1/achievements/leaderboard",
        json={
            "achievements": [
                {"user_identifier": "amy", "badge_name": "First Steps", "points": 10},
                {"user_identifier": "bob", "badge_name": "Team Builder", "points": 50},
                {"user_identifier": "amy", "badge_name": "Payment Pro", "points": 20},
            ]
        },
    )

    assert response.status_code == 200
    entries = response.json()["entries"]
    assert [(e["user_identifier"], e["rank"], e["total_points"]) for e in entries] == [
        ("bob", 1, 50),
        ("amy", 2, 30),
    ]
    assert entries[1]["recent_badges"] == ["First Steps", "Payment Pro"]


def test_domain_errors_return_message_and_count_rejection(client: TestClient):
    response = client.post("/v1/repayment/quote", json={"rent_amount": 500000, "repayment_days": 45})

    assert response.status_code == 422
    assert "Repayment days must be one of" in response.json()["detail"]
    assert 'welile_rejections_total{reason="invalid_term"}' in client.get("/metrics").text


def test_period_comparison_endpoint(client: TestClient, portfolio_payload):
    response = client.post(
        "/v1/portfolio/comparison",
        json={
            **portfolio_payload,
            "current_start": "2026-03-08",
            "current_end": "2026-03-14",
            "previous_start": "2026-03-01",
            "previous_end": "2026-03-07",
        },
    )

    assert response.status_code == 200
    data = response.json()
    # Previous week: 3 installments from tenant-1, all paid
    assert data["previous"]["collected"] == 3 * 11292
    assert data["previous"]["tenants"] == 1
    # Current week: tenant-1 paid 4 of 7, tenant-2 paid all 5
    assert data["current"]["collected"] == 4 * 11292 + 5 * 22583
    assert data["current"]["tenants"] == 2
    assert data["current"]["new_tenants"] == 1
    assert data["tenants_change"] == pytest.approx(100.0)


def test_collection_forecast_endpoint(client: TestClient, portfolio_payload):
    response = client.post("/v1/portfolio/forecast", json=portfolio_payload)

    assert response.status_code == 200
    data = response.json()
    mixed_day_rate = 22583 / (11292 + 22583) * 100
    assert data["forecast_date"] == "2026-03-15"
    assert data["average_collection_rate"] == pytest.approx((7 * 100 + 3 * mixed_day_rate) / 10)
    assert data["trend"] < 0
    assert [h["days_ahead"] for h in data["horizons"]] == [7, 14, 30]
    # Every installment in the snapshot is already past due
    assert all(h["expected_amount"] == 0 for h in data["horizons"])


def test_agent_earnings_endpoint(client: TestClient):
    response = client.post(
        "/v1/portfolio/earnings",
        json={
            "earnings": [
                {"agent_name": "Agnes", "earning_type": "commission", "amount": 5000},
                {"agent_name": "Agnes", "earning_type": "pipeline_bonus", "amount": 500},
                {"agent_name": "Agnes", "earning_type": "withdrawal", "amount": 2000},
                {"agent_name": "Brian", "earning_type": "recording_bonus", "amount": None},
            ]
        },
    )

    assert response.status_code == 200
    agnes, brian = response.json()
    assert agnes["agent_name"] == "Agnes"
    assert agnes["total_earned"] == 5500
    assert agnes["withdrawable"] == 5000
    assert agnes["available_balance"] == 3000
    assert brian["total_earned"] == 0


@pytest.fixture
def draft_client(client: TestClient):
    store = InMemoryDraftStore()
    client.app.dependency_overrides[get_draft_store] = lambda: store
    yield client
    client.app.dependency_overrides.clear()


def test_draft_save_load_clear(draft_client: TestClient):
    saved = draft_client.put(
        "/v1/drafts/agent-1",
        json={"kind": "full", "tenant_name": "Jane", "rent_amount": 500000, "legacy_field": "x"},
    )

    assert saved.status_code == 200
    assert saved.json()["kind"] == "full"
    assert "legacy_field" not in saved.json()

    loaded = draft_client.get("/v1/drafts/agent-1")
    assert loaded.json()["tenant_name"] == "Jane"

    assert draft_client.delete("/v1/drafts/agent-1").status_code == 204
    assert draft_client.get("/v1/drafts/agent-1").status_code == 404


def test_draft_with_unknown_kind_is_rejected(draft_client: TestClient):
    response = draft_client.put("/v1/drafts/agent-1", json={"kind": "partial"})

    assert response.status_code == 422
    assert "Unknown draft kind" in response.json()["detail"]


def test_draft_quote(client: TestClient):
    full = client.post("/v1/drafts/quote", json={"kind": "full", "rent_amount": 500000, "repayment_days": 60})
    lead = client.post("/v1/drafts/quote", json={"kind": "pipeline", "rent_amount": 300000})
    incomplete = client.post("/v1/drafts/quote", json={"kind": "full", "tenant_name": "Jane"})

    assert full.json()["daily_installment"] == 11292
    assert lead.json()["access_fees"] == 0
    assert lead.json()["repayment_days"] == 30
    assert incomplete.status_code == 422
