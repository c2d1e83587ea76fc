"""Time-bucketed trends and period-over-period comparisons"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from welile_hub.domain.models import (
    STATUS_ACTIVE,
    STATUS_PIPELINE,
    CollectionForecast,
    ForecastHorizon,
    PaymentRecord,
    PaymentTrendPoint,
    PeriodComparison,
    PeriodMetrics,
    TenantRecord,
    TenantTrendPoint,
    normalize_status,
)
from welile_hub.domain.statistics import collection_rate
from welile_hub.utils.date_utils import to_date, to_datetime, trailing_window
from welile_hub.utils.numbers import to_amount


def percent_change(current: float, previous: float) -> float:
    """
    Relative change from previous to current, as a percentage.

    A zero baseline yields 100 when anything appeared and 0 otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def payment_trend(payments: Iterable[PaymentRecord], end_date: date, days: int = 30) -> List[PaymentTrendPoint]:
    """
    Daily paid vs expected over the `days` days ending on end_date.

    Days without installments are zero-filled. Paid rows count their paid
    amount, falling back to the amount due when none was recorded.
    """
    window = trailing_window(end_date, days)
    buckets: Dict[date, List[float]] = {day: [0.0, 0.0] for day in window}

    for payment in payments:
        due = to_date(payment.date)
        if due not in buckets:
            continue
        bucket = buckets[due]
        if payment.paid:
            bucket[0] += to_amount(payment.paid_amount) or to_amount(payment.amount_due)
        bucket[1] += to_amount(payment.amount_due)

    return [
        PaymentTrendPoint(
            date=day,
            paid=paid,
            expected=expected,
            rate=collection_rate(paid, expected),
        )
        for day, (paid, expected) in buckets.items()
    ]


def tenant_trend(tenants: Iterable[TenantRecord], end_date: date, days: int = 30) -> List[TenantTrendPoint]:
    """Active and pipeline tenants created per day over the trailing window"""
    window = trailing_window(end_date, days)
    buckets: Dict[date, List[int]] = {day: [0, 0] for day in window}

    for tenant in tenants:
        created = to_date(tenant.created_at)
        if created not in buckets:
            continue
        status = normalize_status(tenant.status)
        if status == STATUS_ACTIVE:
            buckets[created][0] += 1
        elif status == STATUS_PIPELINE:
            buckets[created][1] += 1

    return [
        TenantTrendPoint(date=day, active=active, pipeline=pipeline)
        for day, (active, pipeline) in buckets.items()
    ]


def status_distribution(tenants: Iterable[TenantRecord]) -> Dict[str, int]:
    """Tenant count per status, most common first (ties in first-seen order)"""
    counts: Dict[str, int] = {}
    for tenant in tenants:
        status = normalize_status(tenant.status) or "unknown"
        counts[status] = counts.get(status, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))


def tenants_existing_at(tenants: Iterable[TenantRecord], moment: datetime) -> List[TenantRecord]:
    """Tenants whose record had been created by the given moment"""
    cutoff = to_datetime(moment)
    existing = []
    for tenant in tenants:
        created = to_datetime(tenant.created_at)
        if created is not None and created <= cutoff:
            existing.append(tenant)
    return existing


def period_metrics(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    start: date,
    end: date,
) -> PeriodMetrics:
    """Collections for installments due within [start, end] and tenant counts as of end"""
    tenants = list(tenants)
    collected = 0.0
    expected = 0.0
    for payment in payments:
        due = to_date(payment.date)
        if due is None or not start <= due <= end:
            continue
        expected += to_amount(payment.amount_due)
        if payment.paid:
            collected += to_amount(payment.paid_amount)

    end_of_period = datetime(end.year, end.month, end.day, 23, 59, 59, 999999)
    existing = tenants_existing_at(tenants, end_of_period)
    new_tenants = [t for t in existing if to_date(t.created_at) >= start]

    return PeriodMetrics(
        start=start,
        end=end,
        collected=collected,
        expected=expected,
        collection_rate=collection_rate(collected, expected),
        tenants=len(existing),
        new_tenants=len(new_tenants),
    )


def period_comparison(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    current_start: date,
    current_end: date,
    previous_start: date,
    previous_end: date,
) -> PeriodComparison:
    """Month-over-month style comparison of two reporting periods"""
    tenants = list(tenants)
    payments = list(payments)
    current = period_metrics(tenants, payments, current_start, current_end)
    previous = period_metrics(tenants, payments, previous_start, previous_end)

    return PeriodComparison(
        current=current,
        previous=previous,
        collected_change=percent_change(current.collected, previous.collected),
        collection_rate_change=current.collection_rate - previous.collection_rate,
        tenants_change=percent_change(current.tenants, previous.tenants),
    )


FORECAST_HISTORY_DAYS = 30
FORECAST_HORIZONS = (7, 14, 30)


def linear_trend(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index; 0 with fewer than 2 points"""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_x2 = sum(i * i for i in range(n))
    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def daily_collection_rates(payments: Iterable[PaymentRecord], start: date, end: date) -> List[float]:
    """
    Collection rate for each day in [start, end] that has installments, oldest first.

    Days without installments are skipped rather than counted as 0%.
    """
    days: Dict[date, List[float]] = {}
    for payment in payments:
        due = to_date(payment.date)
        if due is None or not start <= due <= end:
            continue
        bucket = days.setdefault(due, [0.0, 0.0])
        if payment.paid:
            bucket[0] += to_amount(payment.paid_amount) or to_amount(payment.amount_due)
        bucket[1] += to_amount(payment.amount_due)

    return [collection_rate(paid, expected) for _, (paid, expected) in sorted(days.items())]


def collection_forecast(
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
    horizons: Sequence[int] = FORECAST_HORIZONS,
) -> CollectionForecast:
    """
    Forecast collections for the coming weeks from the last 30 days of history.

    The average daily collection rate is shifted by its linear trend times
    the days ahead, clamped to 0-100%, and applied to the amounts falling
    due between today and each horizon (both inclusive).
    """
    today = today if today is not None else date.today()
    payments = list(payments)

    rates = daily_collection_rates(payments, today - timedelta(days=FORECAST_HISTORY_DAYS), today)
    average = sum(rates) / len(rates) if rates else 0.0
    trend = linear_trend(rates)

    forecast = CollectionForecast(forecast_date=today, average_collection_rate=average, trend=trend)
    for days_ahead in horizons:
        target = today + timedelta(days=days_ahead)
        expected = 0.0
        for payment in payments:
            due = to_date(payment.date)
            if due is not None and today <= due <= target:
                expected += to_amount(payment.amount_due)

        rate = min(100.0, max(0.0, average + trend * days_ahead))
        forecast.horizons.append(
            ForecastHorizon(
                days_ahead=days_ahead,
                target_date=target,
                expected_amount=expected,
                collection_rate=rate,
                forecast_amount=expected * rate / 100,
            )
        )
    return forecast
