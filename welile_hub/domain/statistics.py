"""Portfolio statistics - derived collection metrics over tenant and payment rows"""

from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Optional

from welile_hub.domain.fees import expected_amount, tenant_repayment_details
from welile_hub.domain.models import (
    SOURCE_AUTO_IMPORT,
    SOURCE_BULK_UPLOAD,
    STATUS_ACTIVE,
    AgentEarnings,
    AgentPerformance,
    EarningRecord,
    PaymentRecord,
    PortfolioSummary,
    TenantPaymentStats,
    TenantRecord,
    normalize_status,
)
from welile_hub.utils.date_utils import to_date
from welile_hub.utils.numbers import safe_percentage, to_amount

# Missed past-due installments that flag a tenant as at risk of default
AT_RISK_THRESHOLD = 3


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def is_elapsed(payment: PaymentRecord, today: date) -> bool:
    """Installment is due on or before today; undated rows count as due"""
    due = to_date(payment.date)
    return due is None or due <= today


def is_missed(payment: PaymentRecord, today: date) -> bool:
    """Unpaid and strictly past its due date"""
    due = to_date(payment.date)
    return not payment.paid and due is not None and due < today


def sort_by_due_date(payments: Iterable[PaymentRecord]) -> List[PaymentRecord]:
    """Oldest first, undated rows last; ties keep their input order"""
    return sorted(
        payments,
        key=lambda p: (to_date(p.date) is None, to_date(p.date) or date.min),
    )


def total_expected(payments: Iterable[PaymentRecord], today: Optional[date] = None) -> float:
    """Sum of amounts due over installments that have come due"""
    today = _today(today)
    return sum(to_amount(p.amount_due) for p in payments if is_elapsed(p, today))


def total_paid(payments: Iterable[PaymentRecord]) -> float:
    """Sum of recorded paid amounts over installments marked paid"""
    return sum(to_amount(p.paid_amount) for p in payments if p.paid)


def outstanding_balance(payments: Iterable[PaymentRecord], today: Optional[date] = None) -> float:
    """
    Expected-to-date minus paid.

    Negative means the tenant has paid ahead; the sign is kept so callers
    can tell owing from paid-ahead.
    """
    payments = list(payments)
    return total_expected(payments, today) - total_paid(payments)


def collection_rate(paid: float, expected: float) -> float:
    """Paid as a percentage of expected; 0 when nothing is expected yet"""
    return safe_percentage(to_amount(paid), to_amount(expected))


def conversion_rate(converted: int, pipeline_seen: int) -> float:
    """Share of pipeline leads that became active tenants, as a percentage"""
    return safe_percentage(converted, pipeline_seen)


def is_converted(tenant: TenantRecord) -> bool:
    """Active tenant that was edited after onboarding, i.e. promoted from pipeline"""
    return normalize_status(tenant.status) == STATUS_ACTIVE and tenant.edited_at is not None


def pipeline_conversion_rate(tenants: Iterable[TenantRecord]) -> float:
    """
    Conversion rate over every lead ever seen.

    Leads ever seen = tenants still in pipeline + tenants converted out of it.
    """
    tenants = list(tenants)
    converted = sum(1 for t in tenants if is_converted(t))
    still_pipeline = sum(1 for t in tenants if t.is_pipeline)
    return conversion_rate(converted, still_pipeline + converted)


def missed_installments(payments: Iterable[PaymentRecord], today: Optional[date] = None) -> List[PaymentRecord]:
    """Unpaid installments whose due date has passed"""
    today = _today(today)
    return [p for p in payments if is_missed(p, today)]


def is_at_risk(payments: Iterable[PaymentRecord], today: Optional[date] = None) -> bool:
    """3 or more missed past-due installments"""
    return len(missed_installments(payments, today)) >= AT_RISK_THRESHOLD


def group_payments_by_tenant(payments: Iterable[PaymentRecord]) -> Dict[str, List[PaymentRecord]]:
    """Bucket payment rows per tenant id, keeping first-seen tenant order"""
    grouped: Dict[str, List[PaymentRecord]] = {}
    for payment in payments:
        grouped.setdefault(payment.tenant_id, []).append(payment)
    return grouped


def tenant_payment_stats(
    tenant_id: str,
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
) -> TenantPaymentStats:
    """
    Derived payment metrics for a single tenant.

    Rows belonging to other tenants are ignored. Counts cover installments
    due so far; payments recorded ahead of their due date still count
    towards total_paid, which is how a negative outstanding balance arises.
    """
    today = _today(today)
    own = sort_by_due_date(p for p in payments if p.tenant_id == tenant_id)
    due_so_far = [p for p in own if is_elapsed(p, today)]

    expected = total_expected(due_so_far, today)
    paid = total_paid(own)
    missed = missed_installments(own, today)

    return TenantPaymentStats(
        tenant_id=tenant_id,
        total_expected=expected,
        total_paid=paid,
        outstanding_balance=expected - paid,
        collection_rate=collection_rate(paid, expected),
        paid_count=sum(1 for p in due_so_far if p.paid),
        total_count=len(due_so_far),
        missed_count=len(missed),
        at_risk=len(missed) >= AT_RISK_THRESHOLD,
        payments=due_so_far,
    )


def count_at_risk(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
) -> int:
    grouped = group_payments_by_tenant(payments)
    return sum(1 for t in tenants if is_at_risk(grouped.get(t.id, []), today))


def default_rate(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
) -> float:
    """At-risk tenants as a percentage of all tenants"""
    tenants = list(tenants)
    return safe_percentage(count_at_risk(tenants, payments, today), len(tenants))


def portfolio_summary(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
) -> PortfolioSummary:
    """
    Portfolio-wide figures for the admin and executive dashboards.

    - Fees and expected revenue are priced through the fee calculator, so
      pipeline tenants contribute no fees and unpriceable rows contribute 0
    - Outstanding balance and collection rate compare paid against what
      has come due so far
    - Overdue amount sums unpaid installments past their due date
    """
    today = _today(today)
    tenants = list(tenants)
    payments = list(payments)
    number_of_tenants = len(tenants)

    sources = Counter((t.source or "").lower() for t in tenants)
    bulk_uploaded = sources[SOURCE_BULK_UPLOAD]
    auto_imported = sources[SOURCE_AUTO_IMPORT]

    status_counts: Dict[str, int] = {}
    for tenant in tenants:
        status = normalize_status(tenant.status) or "unknown"
        status_counts[status] = status_counts.get(status, 0) + 1

    total_access_fees = 0.0
    for tenant in tenants:
        details = tenant_repayment_details(tenant)
        if details is not None:
            total_access_fees += details.access_fees
    total_expected_revenue = sum(expected_amount(t) for t in tenants)

    total_rent = sum(to_amount(t.rent_amount) for t in tenants)
    # Stored fee, not recomputed: pipeline rows carry 0 and older rows predate the 2.5% rule
    total_registration_fees = sum(to_amount(t.registration_fee) for t in tenants)

    paid_rows = [p for p in payments if p.paid]
    rent_paid = total_paid(paid_rows)
    expected_to_date = total_expected(payments, today)
    overdue = sum(to_amount(p.amount_due) for p in missed_installments(payments, today))
    at_risk = count_at_risk(tenants, payments, today)

    return PortfolioSummary(
        number_of_tenants=number_of_tenants,
        manual_tenants=number_of_tenants - bulk_uploaded - auto_imported,
        bulk_uploaded_tenants=bulk_uploaded,
        auto_imported_tenants=auto_imported,
        status_counts=status_counts,
        total_rent_amounts=total_rent,
        total_registration_fees=total_registration_fees,
        total_access_fees=total_access_fees,
        total_expected_revenue=total_expected_revenue,
        total_rent_paid=rent_paid,
        overdue_payments=overdue,
        outstanding_balance=expected_to_date - rent_paid,
        collection_rate=collection_rate(rent_paid, expected_to_date),
        tenants_at_risk=at_risk,
        default_rate=safe_percentage(at_risk, number_of_tenants),
        conversion_rate=pipeline_conversion_rate(tenants),
        average_rent_amount=total_rent / number_of_tenants if number_of_tenants else 0.0,
        average_payment_amount=rent_paid / len(paid_rows) if paid_rows else 0.0,
    )


def agent_performance(
    tenants: Iterable[TenantRecord],
    payments: Iterable[PaymentRecord],
    today: Optional[date] = None,
) -> List[AgentPerformance]:
    """
    Collections per agent, best collector first.

    Tenants without an agent are left out. Agents with equal collections
    keep the order in which they first appear among the tenants.
    """
    today = _today(today)
    agent_tenants: Dict[str, List[str]] = {}
    for tenant in tenants:
        if tenant.agent_name:
            agent_tenants.setdefault(tenant.agent_name, []).append(tenant.id)

    grouped = group_payments_by_tenant(payments)
    results = []
    for agent_name, tenant_ids in agent_tenants.items():
        agent_payments = [p for tenant_id in tenant_ids for p in grouped.get(tenant_id, [])]
        collected = total_paid(agent_payments)
        expected = total_expected(agent_payments, today)
        results.append(
            AgentPerformance(
                agent_name=agent_name,
                tenants=len(tenant_ids),
                collected=collected,
                expected=expected,
                collection_rate=collection_rate(collected, expected),
            )
        )

    return sorted(results, key=lambda a: a.collected, reverse=True)


EARNING_COMMISSION = "commission"
EARNING_RECORDING_BONUS = "recording_bonus"
EARNING_PIPELINE_BONUS = "pipeline_bonus"
EARNING_DATA_ENTRY = "data_entry"
EARNING_SIGNUP_BONUS = "signup_bonus"
EARNING_WITHDRAWAL = "withdrawal"

_EARNING_FIELDS = {
    EARNING_COMMISSION: "commissions",
    EARNING_RECORDING_BONUS: "recording_bonuses",
    EARNING_PIPELINE_BONUS: "pipeline_bonuses",
    EARNING_DATA_ENTRY: "data_entry_rewards",
    EARNING_SIGNUP_BONUS: "signup_bonuses",
    EARNING_WITHDRAWAL: "withdrawn_commission",
}


def agent_earnings(earnings: Iterable[EarningRecord]) -> AgentEarnings:
    """
    Earnings breakdown over one agent's ledger rows, grouped by earning type.

    Commissions and recording bonuses are withdrawable; pipeline bonuses,
    data-entry rewards and signup bonuses are not. Withdrawals are reduced
    from the withdrawable total to give the available balance. Unknown
    earning types are ignored.
    """
    breakdown = AgentEarnings()
    for earning in earnings:
        attr = _EARNING_FIELDS.get((earning.earning_type or "").strip().lower())
        if attr is None:
            continue
        setattr(breakdown, attr, getattr(breakdown, attr) + to_amount(earning.amount))
    return breakdown


def earnings_by_agent(earnings: Iterable[EarningRecord]) -> Dict[str, AgentEarnings]:
    """
    agent_earnings per agent, in first-seen order.

    Agent names are matched case-insensitively; the first spelling seen is kept.
    Rows without an agent are left out.
    """
    names: Dict[str, str] = {}
    rows: Dict[str, List[EarningRecord]] = {}
    for earning in earnings:
        if not earning.agent_name:
            continue
        key = earning.agent_name.strip().lower()
        names.setdefault(key, earning.agent_name)
        rows.setdefault(key, []).append(earning)
    return {names[key]: agent_earnings(agent_rows) for key, agent_rows in rows.items()}
