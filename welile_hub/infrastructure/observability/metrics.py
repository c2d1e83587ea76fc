"""Prometheus metrics for quote volume, portfolio computations and risk bands"""

from typing import Iterable

from prometheus_client import Counter, Histogram

# Fee quote metrics
quote_counter = Counter(
    "welile_repayment_quotes_total",
    "Repayment quotes calculated",
    ["term_days", "pipeline"],
)

rejection_counter = Counter(
    "welile_rejections_total",
    "Requests refused by domain validation",
    ["reason"],  # invalid_rent_amount | invalid_term | invalid_draft
)

# Portfolio metrics
portfolio_computation_counter = Counter(
    "welile_portfolio_computations_total",
    "Portfolio statistics computed",
    ["kind"],  # summary | risk
)

portfolio_size_histogram = Histogram(
    "welile_portfolio_tenants",
    "Tenants per portfolio computation",
    buckets=[1, 10, 100, 1_000, 10_000, 100_000],
)

risk_level_counter = Counter(
    "welile_risk_assessments_total",
    "Tenant risk assessments by band",
    ["level"],  # low | medium | high
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(repayment_days: int, pipeline: bool) -> None:
    """Record one successful fee quote"""
    quote_counter.labels(term_days=str(repayment_days), pipeline=str(pipeline).lower()).inc()


def record_rejection(reason: str) -> None:
    rejection_counter.labels(reason=reason).inc()


def record_portfolio(kind: str, tenant_count: int) -> None:
    """Record a portfolio computation and the size of the snapshot it ran on"""
    portfolio_computation_counter.labels(kind=kind).inc()
    portfolio_size_histogram.observe(tenant_count)


def record_risk_levels(levels: Iterable[str]) -> None:
    for level in levels:
        risk_level_counter.labels(level=level).inc()
