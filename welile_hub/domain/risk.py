"""Risk scoring engine - heuristic default-risk assessment per tenant"""

from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from welile_hub.domain.models import PaymentRecord, RiskAnalysis, TenantPaymentStats

T = TypeVar("T")

RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"

HIGH_RISK_SCORE = 60
MEDIUM_RISK_SCORE = 30

RECENT_WINDOW = 3

INDICATOR_VERY_LOW_COLLECTION = "Very low collection rate"
INDICATOR_LOW_COLLECTION = "Low collection rate"
INDICATOR_HIGH_MISSED = "High missed payments"
INDICATOR_INCONSISTENT = "Inconsistent payments"
INDICATOR_NO_RECENT = "No recent payments"
INDICATOR_DECLINING = "Declining payment trend"

PREDICTIONS = {
    RISK_HIGH: "High risk of payment default",
    RISK_MEDIUM: "Moderate risk - needs monitoring",
    RISK_LOW: "Low risk - stable payments",
}


def collection_rate_points(collection_rate: float) -> tuple[int, Optional[str]]:
    """Up to 40 points for a weak collection rate"""
    if collection_rate < 30:
        return 40, INDICATOR_VERY_LOW_COLLECTION
    elif collection_rate < 50:
        return 25, INDICATOR_LOW_COLLECTION
    elif collection_rate < 70:
        return 10, None
    return 0, None


def missed_rate_points(paid_count: int, total_count: int) -> tuple[int, Optional[str]]:
    """Up to 30 points for the share of installments missed so far"""
    missed_rate = (total_count - paid_count) / total_count if total_count > 0 else 0
    if missed_rate > 0.6:
        return 30, INDICATOR_HIGH_MISSED
    elif missed_rate > 0.4:
        return 20, INDICATOR_INCONSISTENT
    elif missed_rate > 0.2:
        return 10, None
    return 0, None


def recent_trend_points(payments: Sequence[PaymentRecord]) -> tuple[int, Optional[str]]:
    """Up to 30 points when the last 3 installments went unpaid"""
    if len(payments) < RECENT_WINDOW:
        return 0, None

    paid_recent = sum(1 for p in payments[-RECENT_WINDOW:] if p.paid)
    if paid_recent == 0:
        return 30, INDICATOR_NO_RECENT
    elif paid_recent == 1:
        return 15, INDICATOR_DECLINING
    return 0, None


def risk_level(score: int) -> str:
    """Map a risk score to its band"""
    if score >= HIGH_RISK_SCORE:
        return RISK_HIGH
    elif score >= MEDIUM_RISK_SCORE:
        return RISK_MEDIUM
    return RISK_LOW


def calculate_risk_score(
    collection_rate: float,
    paid_count: int,
    total_count: int,
    payments: Sequence[PaymentRecord] = (),
) -> RiskAnalysis:
    """
    Score a tenant's default risk from 0 (healthy) to 100 (worst).

    Additive factors:
    - Collection rate: <30% +40, <50% +25, <70% +10
    - Missed rate (missed / installments so far): >60% +30, >40% +20, >20% +10
    - Last 3 installments (only with 3 or more): 0 paid +30, 1 paid +15

    Bands: >=60 high, >=30 medium, otherwise low.

    Args:
        collection_rate: Paid as a percentage of expected
        paid_count: Installments paid so far
        total_count: Installments due so far
        payments: Installments due so far, oldest first
    """
    score = 0
    indicators: List[str] = []

    for points, indicator in (
        collection_rate_points(collection_rate),
        missed_rate_points(paid_count, total_count),
        recent_trend_points(payments),
    ):
        score += points
        if indicator:
            indicators.append(indicator)

    level = risk_level(score)
    return RiskAnalysis(
        score=score,
        level=level,
        indicators=indicators,
        prediction=PREDICTIONS[level],
    )


def assess_tenant(stats: TenantPaymentStats) -> RiskAnalysis:
    """Risk analysis straight from a tenant's derived payment stats"""
    return calculate_risk_score(
        stats.collection_rate,
        stats.paid_count,
        stats.total_count,
        stats.payments,
    )


def recommended_actions(analysis: RiskAnalysis) -> List[str]:
    """Follow-up actions for field agents, most urgent first"""
    actions: List[str] = []

    if analysis.score >= HIGH_RISK_SCORE:
        actions.append("Immediate agent follow-up required")
        actions.append("Schedule face-to-face meeting with tenant")
        actions.append("Discuss payment plan restructuring")
    elif analysis.score >= MEDIUM_RISK_SCORE:
        actions.append("Weekly reminder calls needed")
        actions.append("Monitor payment patterns closely")

    if INDICATOR_VERY_LOW_COLLECTION in analysis.indicators:
        actions.append("Investigate tenant's financial situation")
    if INDICATOR_NO_RECENT in analysis.indicators:
        actions.append("Consider legal notice if no response")
    if INDICATOR_HIGH_MISSED in analysis.indicators:
        actions.append("Document all communication attempts")

    return actions


def rank_by_risk(items: Iterable[T], key: Callable[[T], RiskAnalysis]) -> List[T]:
    """Highest score first; equal scores keep their input order"""
    return sorted(items, key=lambda item: key(item).score, reverse=True)


def risk_distribution(analyses: Iterable[RiskAnalysis]) -> Dict[str, int]:
    """Count of analyses per risk band, every band present"""
    counts = {RISK_HIGH: 0, RISK_MEDIUM: 0, RISK_LOW: 0}
    for analysis in analyses:
        counts[analysis.level] += 1
    return counts
