"""Pydantic schemas for API request/response validation"""

import datetime as dt
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from welile_hub.domain.models import ActivityCounts, EarnedBadge, EarningRecord, PaymentRecord, TenantRecord


class TenantIn(BaseModel):
    """Tenant row as supplied by the application layer"""

    id: str = Field(..., min_length=1)
    rent_amount: Optional[float] = None
    repayment_days: Optional[int] = None
    status: str = "active"
    created_at: Optional[datetime] = None
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    service_center: Optional[str] = None
    source: Optional[str] = None
    registration_fee: Optional[float] = None
    edited_at: Optional[datetime] = None

    def to_domain(self) -> TenantRecord:
        return TenantRecord(**self.model_dump())


class PaymentIn(BaseModel):
    """Daily installment row"""

    tenant_id: str
    date: Optional[dt.date] = None
    amount_due: Optional[float] = None
    paid: bool = False
    paid_amount: Optional[float] = None
    recorded_by: Optional[str] = None
    recorded_at: Optional[datetime] = None

    def to_domain(self) -> PaymentRecord:
        return PaymentRecord(**self.model_dump())


class QuoteRequest(BaseModel):
    """Request body for POST /v1/repayment/quote"""

    rent_amount: float = Field(..., description="Monthly rent being financed")
    repayment_days: int = Field(..., description="30, 60 or 90")
    status: str = Field("active", description="Tenant status; pipeline tenants pay no fees")


class ScheduleRequest(QuoteRequest):
    """Request body for POST /v1/repayment/schedule"""

    start_date: date


class QuoteResponse(BaseModel):
    rent_amount: float
    repayment_days: int
    registration_fee: int
    access_fees: int
    total_amount: float
    daily_installment: int


class InstallmentSchema(BaseModel):
    """Single day in a repayment schedule"""

    sequence_index: int
    due_date: date
    amount_due: int
    paid: bool = False
    paid_amount: float = 0


class ScheduleResponse(BaseModel):
    details: QuoteResponse
    installments: List[InstallmentSchema]


class PortfolioRequest(BaseModel):
    """Snapshot of tenant and payment rows to aggregate over"""

    tenants: List[TenantIn] = Field(default_factory=list)
    payments: List[PaymentIn] = Field(default_factory=list)
    today: Optional[date] = None

    def tenant_records(self) -> List[TenantRecord]:
        return [t.to_domain() for t in self.tenants]

    def payment_records(self) -> List[PaymentRecord]:
        return [p.to_domain() for p in self.payments]


class TrendRequest(PortfolioRequest):
    days: Optional[int] = Field(None, gt=0, le=366)


class PortfolioSummaryResponse(BaseModel):
    number_of_tenants: int
    manual_tenants: int
    bulk_uploaded_tenants: int
    auto_imported_tenants: int
    status_counts: Dict[str, int]
    total_rent_amounts: float
    total_registration_fees: float
    total_access_fees: float
    total_expected_revenue: float
    total_rent_paid: float
    overdue_payments: float
    outstanding_balance: float
    collection_rate: float
    tenants_at_risk: int
    default_rate: float
    conversion_rate: float
    average_rent_amount: float
    average_payment_amount: float


class AgentPerformanceSchema(BaseModel):
    agent_name: str
    tenants: int
    collected: float
    expected: float
    collection_rate: float


class TenantRiskSchema(BaseModel):
    """Risk assessment for one tenant"""

    tenant_id: str
    total_expected: float
    total_paid: float
    outstanding_balance: float
    collection_rate: float
    missed_count: int
    at_risk: bool
    score: int
    level: str
    indicators: List[str]
    prediction: str
    recommended_actions: List[str]


class RiskResponse(BaseModel):
    tenants: List[TenantRiskSchema]
    distribution: Dict[str, int]


class PaymentTrendSchema(BaseModel):
    date: dt.date
    paid: float
    expected: float
    rate: float


class TenantTrendSchema(BaseModel):
    date: dt.date
    active: int
    pipeline: int


class TrendResponse(BaseModel):
    payment_trend: List[PaymentTrendSchema]
    tenant_trend: List[TenantTrendSchema]
    status_distribution: Dict[str, int]


class AchievementCheckRequest(BaseModel):
    """Request body for POST /v1/achievements/check"""

    user_identifier: str = Field(..., min_length=1)
    action: str
    tenants_added: int = Field(0, ge=0)
    payments_recorded: int = Field(0, ge=0)
    reports_generated: int = Field(0, ge=0)
    recordings: int = Field(0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    already_earned: List[str] = Field(default_factory=list)

    def activity_counts(self) -> ActivityCounts:
        return ActivityCounts(
            tenants_added=self.tenants_added,
            payments_recorded=self.payments_recorded,
            reports_generated=self.reports_generated,
            recordings=self.recordings,
        )


class AchievementCheckResponse(BaseModel):
    user_identifier: str
    new_badges: List[str]


class EarnedBadgeIn(BaseModel):
    user_identifier: str
    badge_name: str
    points: int = 0
    earned_at: Optional[datetime] = None

    def to_domain(self) -> EarnedBadge:
        return EarnedBadge(**self.model_dump())


class LeaderboardRequest(BaseModel):
    achievements: List[EarnedBadgeIn] = Field(default_factory=list)
    since: Optional[datetime] = None


class LeaderboardEntrySchema(BaseModel):
    user_identifier: str
    total_points: int
    badge_count: int
    rank: int
    recent_badges: List[str]


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntrySchema]


class ComparisonRequest(PortfolioRequest):
    """Two reporting periods to compare over the same snapshot"""

    current_start: date
    current_end: date
    previous_start: date
    previous_end: date


class PeriodMetricsSchema(BaseModel):
    start: date
    end: date
    collected: float
    expected: float
    collection_rate: float
    tenants: int
    new_tenants: int


class PeriodComparisonResponse(BaseModel):
    current: PeriodMetricsSchema
    previous: PeriodMetricsSchema
    collected_change: float
    collection_rate_change: float
    tenants_change: float


class ForecastHorizonSchema(BaseModel):
    days_ahead: int
    target_date: date
    expected_amount: float
    collection_rate: float
    forecast_amount: float


class ForecastResponse(BaseModel):
    forecast_date: date
    average_collection_rate: float
    trend: float
    horizons: List[ForecastHorizonSchema]


class EarningIn(BaseModel):
    """Agent earnings ledger row"""

    agent_name: Optional[str] = None
    earning_type: str
    amount: Optional[float] = None
    created_at: Optional[datetime] = None

    def to_domain(self) -> EarningRecord:
        return EarningRecord(**self.model_dump())


class EarningsRequest(BaseModel):
    earnings: List[EarningIn] = Field(default_factory=list)


class AgentEarningsSchema(BaseModel):
    agent_name: str
    commissions: float
    recording_bonuses: float
    pipeline_bonuses: float
    data_entry_rewards: float
    signup_bonuses: float
    withdrawn_commission: float
    total_earned: float
    withdrawable: float
    non_withdrawable: float
    available_balance: float
