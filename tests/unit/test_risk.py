"""Unit tests for risk scoring logic"""

import random
import pytest
from welile_hub.domain.models import PaymentRecord, RiskAnalysis
from welile_hub.domain.risk import (
    assess_tenant,
    calculate_risk_score,
    rank_by_risk,
    recommended_actions,
    risk_distribution,
    risk_level,
)
from welile_hub.domain.statistics import tenant_payment_stats


def _recent(*paid_flags: bool) -> list[PaymentRecord]:
    return [PaymentRecord("tenant-1", None, 1000, paid=flag, paid_amount=1000 if flag else None) for flag in paid_flags]


def test_worst_case_scores_full_hundred():
    """Very low collections, mostly missed, nothing recent"""
    analysis = calculate_risk_score(20, 2, 10, _recent(False, False, False))

    assert analysis.score == 100
    assert analysis.level == "high"
    assert analysis.indicators == ["Very low collection rate", "High missed payments", "No recent payments"]
    assert analysis.prediction == "High risk of payment default"


def test_healthy_tenant_scores_zero():
    analysis = calculate_risk_score(95, 10, 10, _recent(True, True, True))

    assert analysis.score == 0
    assert analysis.level == "low"
    assert analysis.indicators == []
    assert analysis.prediction == "Low risk - stable payments"


@pytest.mark.parametrize(
    "rate, points",
    [(0, 40), (29.99, 40), (30, 25), (49.9, 25), (50, 10), (69.9, 10), (70, 0), (100, 0), (140, 0)],
)
def test_collection_rate_breakpoints(rate, points):
    assert calculate_risk_score(rate, 0, 0).score == points


@pytest.mark.parametrize(
    "paid, total, points",
    [
        (0, 10, 30),   # 100% missed
        (3, 10, 30),   # 70%
        (4, 10, 20),   # exactly 60% is not above 60%
        (5, 10, 20),   # 50%
        (6, 10, 10),   # exactly 40%
        (7, 10, 10),   # 30%
        (8, 10, 0),    # exactly 20%
        (10, 10, 0),
        (0, 0, 0),     # nothing due yet
    ],
)
def test_missed_rate_breakpoints(paid, total, points):
    assert calculate_risk_score(100, paid, total).score == points


@pytest.mark.parametrize(
    "flags, points, indicator",
    [
        ((False, False, False), 30, "No recent payments"),
        ((True, False, False), 15, "Declining payment trend"),
        ((True, True, False), 0, None),
        ((True, True, True), 0, None),
        ((True, True, True, False, False, False), 30, "No recent payments"),
        ((False, False, False, True, True, False), 0, None),
    ],
)
def test_recent_trend_uses_last_three(flags, points, indicator):
    analysis = calculate_risk_score(100, 0, 0, _recent(*flags))

    assert analysis.score == points
    if indicator:
        assert indicator in analysis.indicators


def test_recent_trend_needs_three_installments():
    assert calculate_risk_score(100, 0, 0, _recent(False, False)).score == 0


@pytest.mark.parametrize(
    "score, level",
    [(0, "low"), (29, "low"), (30, "medium"), (59, "medium"), (60, "high"), (100, "high")],
)
def test_risk_level_bands(score, level):
    assert risk_level(score) == level


def test_assess_tenant_with_three_missed(make_payments, today):
    """70% collected, 30% missed, last three unpaid"""
    stats = tenant_payment_stats("tenant-1", make_payments("tenant-1", count=10, paid=7), today)

    analysis = assess_tenant(stats)

    assert analysis.score == 40  # 0 + 10 + 30
    assert analysis.level == "medium"
    assert analysis.indicators == ["No recent payments"]


def test_score_monotonic_in_collection_rate():
    """Lower collection rate never lowers the score, other factors fixed"""
    rng = random.Random(42)
    recent = _recent(True, False, True)

    for paid, total in [(0, 0), (3, 10), (9, 10)]:
        rates = sorted((rng.uniform(0, 120) for _ in range(200)), reverse=True)
        scores = [calculate_risk_score(rate, paid, total, recent).score for rate in rates]
        assert scores == sorted(scores)


def test_rank_by_risk_is_stable():
    """Highest first; equal scores keep their input order"""
    items = [
        ("a", RiskAnalysis(40, "medium", [], "")),
        ("b", RiskAnalysis(70, "high", [], "")),
        ("c", RiskAnalysis(40, "medium", [], "")),
        ("d", RiskAnalysis(0, "low", [], "")),
        ("e", RiskAnalysis(70, "high", [], "")),
    ]

    ranked = rank_by_risk(items, key=lambda item: item[1])

    assert [name for name, _ in ranked] == ["b", "e", "a", "c", "d"]


def test_recommended_actions_high_risk():
    analysis = calculate_risk_score(10, 0, 10, _recent(False, False, False))

    actions = recommended_actions(analysis)

    assert actions[0] == "Immediate agent follow-up required"
    assert "Investigate tenant's financial situation" in actions
    assert "Consider legal notice if no response" in actions
    assert "Document all communication attempts" in actions


def test_recommended_actions_medium_and_low():
    low = calculate_risk_score(100, 10, 10)

    assert recommended_actions(low) == []
    assert recommended_actions(RiskAnalysis(45, "medium", [], "")) == [
        "Weekly reminder calls needed",
        "Monitor payment patterns closely",
    ]


def test_risk_distribution():
    analyses = [
        RiskAnalysis(70, "high", [], ""),
        RiskAnalysis(35, "medium", [], ""),
        RiskAnalysis(80, "high", [], ""),
    ]

    assert risk_distribution(analyses) == {"high": 2, "medium": 1, "low": 0}
    assert risk_distribution([]) == {"high": 0, "medium": 0, "low": 0}
