"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional


# Tenant lifecycle statuses as stored on tenant rows
STATUS_ACTIVE = "active"
STATUS_PENDING = "pending"
STATUS_REVIEW = "review"
STATUS_CLEARED = "cleared"
STATUS_OVERDUE = "overdue"
STATUS_PIPELINE = "pipeline"

TENANT_STATUSES = (
    STATUS_ACTIVE,
    STATUS_PENDING,
    STATUS_REVIEW,
    STATUS_CLEARED,
    STATUS_OVERDUE,
    STATUS_PIPELINE,
)

REPAYMENT_TERMS = (30, 60, 90)

# Tenant row sources
SOURCE_BULK_UPLOAD = "bulk_upload"
SOURCE_AUTO_IMPORT = "auto_import"


def normalize_status(status: Optional[str]) -> str:
    """Rows store both "Active" and "active"; compare on the lower-case form"""
    return (status or "").strip().lower()


@dataclass
class TenantRecord:
    """Tenant row as loaded by the application layer"""

    id: str
    rent_amount: Optional[float]
    repayment_days: Optional[int]
    status: str
    created_at: Optional[datetime] = None
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    service_center: Optional[str] = None
    source: Optional[str] = None
    registration_fee: Optional[float] = None
    edited_at: Optional[datetime] = None

    @property
    def is_pipeline(self) -> bool:
        return normalize_status(self.status) == STATUS_PIPELINE


@dataclass
class PaymentRecord:
    """One daily installment row for a tenant"""

    tenant_id: str
    date: Optional[date]
    amount_due: Optional[float]
    paid: bool = False
    paid_amount: Optional[float] = None
    recorded_by: Optional[str] = None
    recorded_at: Optional[datetime] = None


@dataclass
class RepaymentDetails:
    """Fee breakdown and flat daily installment for one tenant"""

    rent_amount: float
    repayment_days: int
    registration_fee: int
    access_fees: int
    total_amount: float
    daily_installment: int


@dataclass
class InstallmentLineItem:
    """Single day in a tenant's repayment schedule"""

    sequence_index: int
    due_date: date
    amount_due: int
    paid: bool = False
    paid_amount: float = 0
    recorded_by: Optional[str] = None
    recorded_at: Optional[datetime] = None
    service_center: Optional[str] = None


@dataclass
class TenantPaymentStats:
    """Derived payment metrics for one tenant"""

    tenant_id: str
    total_expected: float
    total_paid: float
    outstanding_balance: float
    collection_rate: float
    paid_count: int
    total_count: int
    missed_count: int
    at_risk: bool
    payments: List[PaymentRecord] = field(default_factory=list)


@dataclass
class RiskAnalysis:
    """Heuristic default-risk assessment (0-100, higher is worse)"""

    score: int
    level: str  # "low" | "medium" | "high"
    indicators: List[str]
    prediction: str


@dataclass
class PortfolioSummary:
    """Portfolio-wide counts and money totals for the dashboards"""

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


@dataclass
class AgentPerformance:
    """Collections attributed to one agent's tenants"""

    agent_name: str
    tenants: int
    collected: float
    expected: float
    collection_rate: float


@dataclass
class PaymentTrendPoint:
    """Paid vs expected for one calendar day"""

    date: date
    paid: float
    expected: float
    rate: float


@dataclass
class TenantTrendPoint:
    """Tenants created on one calendar day, by status"""

    date: date
    active: int
    pipeline: int


@dataclass
class PeriodMetrics:
    """Collections and tenant counts for one reporting period"""

    start: date
    end: date
    collected: float
    expected: float
    collection_rate: float
    tenants: int
    new_tenants: int


@dataclass
class PeriodComparison:
    """Current vs previous period with percentage changes"""

    current: PeriodMetrics
    previous: PeriodMetrics
    collected_change: float
    collection_rate_change: float
    tenants_change: float


@dataclass
class ForecastHorizon:
    """Projected collections for installments due within the next `days_ahead` days"""

    days_ahead: int
    target_date: date
    expected_amount: float
    collection_rate: float
    forecast_amount: float


@dataclass
class CollectionForecast:
    """Trend-adjusted collection forecast built from recent daily collection rates"""

    forecast_date: date
    average_collection_rate: float
    trend: float
    horizons: List[ForecastHorizon] = field(default_factory=list)


@dataclass
class EarningRecord:
    """One agent earnings ledger row (commission, bonus, reward or withdrawal)"""

    agent_name: Optional[str]
    earning_type: str
    amount: Optional[float]
    created_at: Optional[datetime] = None


@dataclass
class AgentEarnings:
    """Earnings totals for one agent, split by what can be withdrawn"""

    commissions: float = 0.0
    recording_bonuses: float = 0.0
    pipeline_bonuses: float = 0.0
    data_entry_rewards: float = 0.0
    signup_bonuses: float = 0.0
    withdrawn_commission: float = 0.0

    @property
    def total_earned(self) -> float:
        return (
            self.commissions
            + self.recording_bonuses
            + self.pipeline_bonuses
            + self.data_entry_rewards
            + self.signup_bonuses
        )

    @property
    def withdrawable(self) -> float:
        return self.commissions + self.recording_bonuses

    @property
    def non_withdrawable(self) -> float:
        return self.pipeline_bonuses + self.data_entry_rewards + self.signup_bonuses

    @property
    def available_balance(self) -> float:
        return self.withdrawable - self.withdrawn_commission


@dataclass
class Milestone:
    """Badge unlocked once a counter reaches a threshold"""

    threshold: int
    badge: str


@dataclass
class EarnedBadge:
    """A badge awarded to a user, as stored in user achievements"""

    user_identifier: str
    badge_name: str
    points: int
    earned_at: Optional[datetime] = None


@dataclass
class LeaderboardEntry:
    """Ranked points total for one user"""

    user_identifier: str
    total_points: int
    badge_count: int
    rank: int
    recent_badges: List[str] = field(default_factory=list)


@dataclass
class ActivityCounts:
    """Running totals for one user, as counted by the application layer"""

    tenants_added: int = 0
    payments_recorded: int = 0
    reports_generated: int = 0
    recordings: int = 0
    visited_sections: List[str] = field(default_factory=list)
