"""POST /v1/repayment/* - fee quotes and daily installment schedules"""

import time
from dataclasses import asdict
from fastapi import APIRouter, Request

from welile_hub.api.dependencies import get_request_id
from welile_hub.api.v1.schemas import (
    InstallmentSchema,
    QuoteRequest,
    QuoteResponse,
    ScheduleRequest,
    ScheduleResponse,
)
from welile_hub.domain.fees import calculate_tenant_fees, expand_to_installments
from welile_hub.domain.models import RepaymentDetails, normalize_status, STATUS_PIPELINE
from welile_hub.infrastructure.observability.logging import log_calculation
from welile_hub.infrastructure.observability.metrics import record_quote

router = APIRouter()


def _quote(body: QuoteRequest) -> RepaymentDetails:
    """Price the request; validation errors propagate to the app's 422 handler"""
    details = calculate_tenant_fees(body.rent_amount, body.repayment_days, body.status)
    record_quote(details.repayment_days, normalize_status(body.status) == STATUS_PIPELINE)
    return details


@router.post("/repayment/quote", response_model=QuoteResponse)
def create_quote(body: QuoteRequest, request: Request):
    """
    Calculate registration fee, access fees, total and daily installment.

    Pipeline tenants are quoted with both fees at 0.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    details = _quote(body)

    duration_ms = (time.time() - start_time) * 1000
    log_calculation(
        request_id,
        "repayment_quote",
        duration_ms,
        repayment_days=details.repayment_days,
        total_amount=details.total_amount,
    )
    return QuoteResponse(**asdict(details))


@router.post("/repayment/schedule", response_model=ScheduleResponse)
def create_schedule(body: ScheduleRequest, request: Request):
    """
    Expand a quote into one dated installment per day of the term.

    Returns:
        Fee breakdown plus repayment_days unpaid line items starting at start_date
    """
    start_time = time.time()
    request_id = get_request_id(request)

    details = _quote(body)
    installments = expand_to_installments(details, body.start_date)

    duration_ms = (time.time() - start_time) * 1000
    log_calculation(
        request_id,
        "repayment_schedule",
        duration_ms,
        repayment_days=details.repayment_days,
        installments=len(installments),
    )
    return ScheduleResponse(
        details=QuoteResponse(**asdict(details)),
        installments=[
            InstallmentSchema(
                sequence_index=item.sequence_index,
                due_date=item.due_date,
                amount_due=item.amount_due,
                paid=item.paid,
                paid_amount=item.paid_amount,
            )
            for item in installments
        ],
    )
