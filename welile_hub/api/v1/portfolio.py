"""POST /v1/portfolio/* - dashboard statistics over a tenant/payment snapshot"""

import time
from dataclasses import asdict
from datetime import date
from typing import List
from fastapi import APIRouter, Request

from welile_hub.api.dependencies import get_request_id
from welile_hub.api.v1.schemas import (
    AgentEarningsSchema,
    AgentPerformanceSchema,
    ComparisonRequest,
    EarningsRequest,
    ForecastResponse,
    PeriodComparisonResponse,
    PortfolioRequest,
    PortfolioSummaryResponse,
    RiskResponse,
    TenantRiskSchema,
    TrendRequest,
    TrendResponse,
)
from welile_hub.config import settings
from welile_hub.domain.risk import assess_tenant, rank_by_risk, recommended_actions, risk_distribution
from welile_hub.domain.statistics import (
    agent_performance,
    earnings_by_agent,
    portfolio_summary,
    tenant_payment_stats,
)
from welile_hub.domain.trends import (
    collection_forecast,
    payment_trend,
    period_comparison,
    status_distribution,
    tenant_trend,
)
from welile_hub.infrastructure.observability.logging import log_calculation
from welile_hub.infrastructure.observability.metrics import record_portfolio, record_risk_levels

router = APIRouter()


@router.post("/portfolio/summary", response_model=PortfolioSummaryResponse)
def get_portfolio_summary(body: PortfolioRequest, request: Request):
    """Tenant counts, fee totals, collections, overdue and default figures"""
    start_time = time.time()
    tenants = body.tenant_records()

    summary = portfolio_summary(tenants, body.payment_records(), body.today)

    record_portfolio("summary", len(tenants))
    log_calculation(
        get_request_id(request),
        "portfolio_summary",
        (time.time() - start_time) * 1000,
        tenants=len(tenants),
        collection_rate=summary.collection_rate,
    )
    return PortfolioSummaryResponse(**asdict(summary))


@router.post("/portfolio/risk", response_model=RiskResponse)
def get_portfolio_risk(body: PortfolioRequest, request: Request):
    """
    Score every tenant's default risk.

    Tenants are returned highest score first; equal scores keep the order
    the tenants were supplied in.
    """
    start_time = time.time()
    tenants = body.tenant_records()
    payments = body.payment_records()

    assessed = []
    for tenant in tenants:
        stats = tenant_payment_stats(tenant.id, payments, body.today)
        assessed.append((stats, assess_tenant(stats)))

    ranked = rank_by_risk(assessed, key=lambda pair: pair[1])
    analyses = [analysis for _, analysis in ranked]

    record_portfolio("risk", len(tenants))
    record_risk_levels(a.level for a in analyses)
    log_calculation(
        get_request_id(request),
        "portfolio_risk",
        (time.time() - start_time) * 1000,
        tenants=len(tenants),
    )
    return RiskResponse(
        tenants=[
            TenantRiskSchema(
                tenant_id=stats.tenant_id,
                total_expected=stats.total_expected,
                total_paid=stats.total_paid,
                outstanding_balance=stats.outstanding_balance,
                collection_rate=stats.collection_rate,
                missed_count=stats.missed_count,
                at_risk=stats.at_risk,
                score=analysis.score,
                level=analysis.level,
                indicators=analysis.indicators,
                prediction=analysis.prediction,
                recommended_actions=recommended_actions(analysis),
            )
            for stats, analysis in ranked
        ],
        distribution=risk_distribution(analyses),
    )


@router.post("/portfolio/agents", response_model=List[AgentPerformanceSchema])
def get_agent_performance(body: PortfolioRequest):
    """Collections per agent, best collector first"""
    tenants = body.tenant_records()
    record_portfolio("agents", len(tenants))
    return [
        AgentPerformanceSchema(**asdict(agent))
        for agent in agent_performance(tenants, body.payment_records(), body.today)
    ]


@router.post("/portfolio/trends", response_model=TrendResponse)
def get_trends(body: TrendRequest):
    """Daily payment and onboarding trends over a trailing window"""
    end_date = body.today or date.today()
    days = body.days or settings.trend_window_days
    tenants = body.tenant_records()

    record_portfolio("trends", len(tenants))
    return TrendResponse(
        payment_trend=[asdict(p) for p in payment_trend(body.payment_records(), end_date, days)],
        tenant_trend=[asdict(t) for t in tenant_trend(tenants, end_date, days)],
        status_distribution=status_distribution(tenants),
    )


@router.post("/portfolio/comparison", response_model=PeriodComparisonResponse)
def get_period_comparison(body: ComparisonRequest):
    """Collections and tenant counts for two periods with percentage changes"""
    tenants = body.tenant_records()
    record_portfolio("comparison", len(tenants))
    comparison = period_comparison(
        tenants,
        body.payment_records(),
        current_start=body.current_start,
        current_end=body.current_end,
        previous_start=body.previous_start,
        previous_end=body.previous_end,
    )
    return PeriodComparisonResponse(**asdict(comparison))


@router.post("/portfolio/forecast", response_model=ForecastResponse)
def get_collection_forecast(body: PortfolioRequest, request: Request):
    """Trend-adjusted collections expected over the next 7, 14 and 30 days"""
    start_time = time.time()
    forecast = collection_forecast(body.payment_records(), body.today)

    record_portfolio("forecast", len(body.tenants))
    log_calculation(
        get_request_id(request),
        "collection_forecast",
        (time.time() - start_time) * 1000,
        average_collection_rate=forecast.average_collection_rate,
        trend=forecast.trend,
    )
    return ForecastResponse(**asdict(forecast))


@router.post("/portfolio/earnings", response_model=List[AgentEarningsSchema])
def get_agent_earnings(body: EarningsRequest):
    """Per-agent earnings split into withdrawable and non-withdrawable totals"""
    breakdowns = earnings_by_agent(e.to_domain() for e in body.earnings)
    return [
        AgentEarningsSchema(
            agent_name=agent_name,
            total_earned=earnings.total_earned,
            withdrawable=earnings.withdrawable,
            non_withdrawable=earnings.non_withdrawable,
            available_balance=earnings.available_balance,
            **asdict(earnings),
        )
        for agent_name, earnings in breakdowns.items()
    ]
