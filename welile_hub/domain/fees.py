"""Fee schedule calculation for rent repayment plans"""

import logging
import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from welile_hub.domain.exceptions import InvalidRentAmountError, InvalidTermError
from welile_hub.domain.models import (
    REPAYMENT_TERMS,
    STATUS_PIPELINE,
    InstallmentLineItem,
    RepaymentDetails,
    TenantRecord,
    normalize_status,
)
from welile_hub.utils.numbers import round_half_up, to_amount, to_decimal

logger = logging.getLogger(__name__)

REGISTRATION_FEE_RATE = Decimal("0.025")
# Labelled "compound interest" in the product, but applied as a flat 33% of rent
ACCESS_FEE_RATE = Decimal("0.33")


def _is_number(value) -> bool:
    """Plain int, float or Decimal; bools and other numeric types are refused"""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _validate_rent(rent_amount) -> None:
    if not _is_number(rent_amount):
        raise InvalidRentAmountError(f"Rent amount must be a number, got {rent_amount!r}")
    if not _is_finite(rent_amount) or rent_amount <= 0:
        raise InvalidRentAmountError(f"Rent amount must be positive and finite, got {rent_amount!r}")


def _validate_term(repayment_days) -> None:
    if isinstance(repayment_days, bool) or repayment_days not in REPAYMENT_TERMS:
        raise InvalidTermError(
            f"Repayment days must be one of {REPAYMENT_TERMS}, got {repayment_days!r}"
        )


def calculate_repayment_details(rent_amount: float, repayment_days: int) -> RepaymentDetails:
    """
    Compute the fee breakdown and flat daily installment for a rent amount.

    Rules:
    - Registration fee: 2.5% of rent
    - Access fees: 33% of rent, flat (no compounding over the term)
    - Total: rent + registration fee + access fees
    - Daily installment: total / repayment days
    Every rounded figure is rounded half-up to whole currency units.

    Raises:
        InvalidRentAmountError: rent is not a positive finite number
        InvalidTermError: repayment_days is not 30, 60 or 90

    Example:
        500000 over 60 days -> 12500 + 165000, total 677500, 11292/day
    """
    _validate_rent(rent_amount)
    _validate_term(repayment_days)

    rent = to_decimal(rent_amount)
    registration_fee = round_half_up(rent * REGISTRATION_FEE_RATE)
    access_fees = round_half_up(rent * ACCESS_FEE_RATE)
    total_amount = rent_amount + registration_fee + access_fees
    daily_installment = round_half_up(to_decimal(total_amount) / repayment_days)

    return RepaymentDetails(
        rent_amount=rent_amount,
        repayment_days=repayment_days,
        registration_fee=registration_fee,
        access_fees=access_fees,
        total_amount=total_amount,
        daily_installment=daily_installment,
    )


def calculate_tenant_fees(rent_amount: float, repayment_days: int, status: str) -> RepaymentDetails:
    """
    Fee breakdown honouring the onboarding rule for pipeline tenants.

    Pipeline tenants are leads: both fees are forced to 0 whatever the rent,
    and a zero or missing rent is accepted. Every other status is priced normally.
    """
    if normalize_status(status) != STATUS_PIPELINE:
        return calculate_repayment_details(rent_amount, repayment_days)

    _validate_term(repayment_days)
    # Leads often have no rent captured yet, which reads as 0
    if rent_amount is None:
        rent_amount = 0
    elif not _is_number(rent_amount) or not _is_finite(rent_amount) or rent_amount < 0:
        raise InvalidRentAmountError(f"Rent amount must be a non-negative number, got {rent_amount!r}")
    rent = to_amount(rent_amount)
    return RepaymentDetails(
        rent_amount=rent,
        repayment_days=repayment_days,
        registration_fee=0,
        access_fees=0,
        total_amount=rent,
        daily_installment=round_half_up(to_decimal(rent) / repayment_days),
    )


def expand_to_installments(details: RepaymentDetails, start_date: date) -> List[InstallmentLineItem]:
    """
    Materialize one unpaid line item per day of the repayment term.

    Item N (1-based) is due N - 1 days after start_date and owes the flat
    daily installment. The list is built eagerly since each item is later
    recorded against individually.
    """
    if isinstance(start_date, datetime):
        start_date = start_date.date()

    return [
        InstallmentLineItem(
            sequence_index=i + 1,
            due_date=start_date + timedelta(days=i),
            amount_due=details.daily_installment,
        )
        for i in range(details.repayment_days)
    ]


def _stored_term(value):
    days = to_amount(value)
    return int(days) if days.is_integer() else days


def tenant_repayment_details(tenant: TenantRecord) -> Optional[RepaymentDetails]:
    """
    Fee breakdown for a stored tenant row, or None if the row can't be priced.

    Stored numerics are coalesced the same way the aggregates read them, so a
    rent of "500000" is priced as 500000 and a missing rent as 0.
    """
    try:
        return calculate_tenant_fees(
            to_amount(tenant.rent_amount), _stored_term(tenant.repayment_days), tenant.status
        )
    except (InvalidRentAmountError, InvalidTermError) as e:
        logger.debug("Skipping unpriceable tenant %s: %s", tenant.id, e)
        return None


def expected_amount(tenant: TenantRecord) -> float:
    """Total a tenant is expected to repay; 0 for rows that can't be priced"""
    details = tenant_repayment_details(tenant)
    return to_amount(details.total_amount) if details else 0.0
