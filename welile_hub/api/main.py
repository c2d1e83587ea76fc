"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from welile_hub.api.dependencies import get_request_id
from welile_hub.api.middleware import RequestIDMiddleware, MetricsMiddleware
from welile_hub.api.v1 import achievements, drafts, portfolio, repayment
from welile_hub.config import settings
from welile_hub.domain.exceptions import (
    DomainException,
    InvalidDraftError,
    InvalidRentAmountError,
    InvalidTermError,
)
from welile_hub.infrastructure.observability.logging import log_rejection, setup_logging
from welile_hub.infrastructure.observability.metrics import record_rejection

setup_logging(settings.log_level)

REJECTION_REASONS = {
    InvalidRentAmountError: "invalid_rent_amount",
    InvalidTermError: "invalid_term",
    InvalidDraftError: "invalid_draft",
}


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Domain validation failures are client errors: 422 with the message as detail"""
    reason = REJECTION_REASONS.get(type(exc), "invalid_input")
    record_rejection(reason)
    log_rejection(get_request_id(request), request.url.path, reason, str(exc))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build the app: middleware, domain error mapping, health/metrics and v1 routers"""
    app = FastAPI(
        title="Welile Tenants Hub",
        description="Rent repayment fee schedules and portfolio statistics",
        version="0.1.0",
    )

    # Last added runs first, so every request has an ID before it is timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(DomainException, domain_exception_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in (
        (repayment.router, "repayment"),
        (portfolio.router, "portfolio"),
        (achievements.router, "achievements"),
        (drafts.router, "drafts"),
    ):
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
