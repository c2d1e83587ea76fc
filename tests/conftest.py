"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from typing import Callable, List
from fastapi.testclient import TestClient
from welile_hub.api.main import create_app
from welile_hub.domain.models import PaymentRecord, TenantRecord


TODAY = date(2026, 3, 15)
DAILY_INSTALLMENT = 11292  # 500000 rent over 60 days


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def today() -> date:
    """Fixed reference date so due/past-due splits are reproducible"""
    return TODAY


@pytest.fixture
def make_payments() -> Callable[..., List[PaymentRecord]]:
    """
    Build a run of daily installments ending the day before `today`.

    The first `paid` rows are paid in full, the rest are unpaid.
    """

    def _make(
        tenant_id: str,
        count: int,
        paid: int,
        amount: int = DAILY_INSTALLMENT,
        end: date = TODAY - timedelta(days=1),
    ) -> List[PaymentRecord]:
        start = end - timedelta(days=count - 1)
        return [
            PaymentRecord(
                tenant_id=tenant_id,
                date=start + timedelta(days=i),
                amount_due=amount,
                paid=i < paid,
                paid_amount=amount if i < paid else None,
            )
            for i in range(count)
        ]

    return _make


@pytest.fixture
def sample_tenants() -> List[TenantRecord]:
    """Small mixed portfolio: priced active tenant, bulk-uploaded lead, unpriceable import"""
    return [
        TenantRecord(
            id="tenant-1",
            rent_amount=500000,
            repayment_days=60,
            status="Active",
            created_at=datetime(2026, 1, 10, 9, 30),
            agent_name="Agnes",
            registration_fee=12500,
        ),
        TenantRecord(
            id="tenant-2",
            rent_amount=300000,
            repayment_days=30,
            status="pipeline",
            created_at=datetime(2026, 3, 1, 14, 0),
            agent_name="Brian",
            source="bulk_upload",
            registration_fee=0,
        ),
        TenantRecord(
            id="tenant-3",
            rent_amount=None,
            repayment_days=None,
            status="active",
            created_at=datetime(2026, 3, 10, 8, 0),
            source="auto_import",
        ),
    ]
