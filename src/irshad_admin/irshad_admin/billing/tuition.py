"""Tuition rates in cents.

Dugsi bills per family by number of enrolled children (monthly only).
Mahad bills per student by graduation status, frequency and billing type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import BillingType, GraduationStatus, PaymentFrequency

DUGSI_BASE_RATE = 8000
DUGSI_THIRD_CHILD_RATE = 7000
DUGSI_FOURTH_PLUS_RATE = 6000
MIN_RATE_PER_CHILD = DUGSI_FOURTH_PLUS_RATE
MAX_EXPECTED_FAMILY_RATE = 65000
OVERRIDE_WARNING_RATIO = 0.5

MAHAD_BASE_RATES = {
    GraduationStatus.NON_GRADUATE: {PaymentFrequency.MONTHLY: 12000, PaymentFrequency.BI_MONTHLY: 11000},
    GraduationStatus.GRADUATE: {PaymentFrequency.MONTHLY: 9500, PaymentFrequency.BI_MONTHLY: 9000},
}
SCHOLARSHIP_DISCOUNT = 3000


@dataclass(frozen=True)
class RateBreakdown:
    first_two: int
    third: int
    fourth_plus: int
    total: int


@dataclass(frozen=True)
class OverrideCheck:
    valid: bool
    reason: Optional[str] = None


def dugsi_rate_breakdown(child_count: int) -> RateBreakdown:
    if child_count <= 0:
        return RateBreakdown(first_two=0, third=0, fourth_plus=0, total=0)
    first_two = DUGSI_BASE_RATE * min(child_count, 2)
    third = DUGSI_THIRD_CHILD_RATE if child_count >= 3 else 0
    fourth_plus = DUGSI_FOURTH_PLUS_RATE * max(child_count - 3, 0)
    return RateBreakdown(first_two=first_two, third=third, fourth_plus=fourth_plus, total=first_two + third + fourth_plus)


def dugsi_family_rate(child_count: int) -> int:
    return dugsi_rate_breakdown(child_count).total


def dugsi_tier_description(child_count: int) -> str:
    if child_count <= 0:
        return "No children enrolled"
    if child_count == 1:
        return "1 child at $80/month"
    if child_count == 2:
        return "2 children at $80/month each"
    if child_count == 3:
        return "3 children (2 at $80, 1 at $70)"
    return f"{child_count} children (2 at $80, 1 at $70, {child_count - 3} at $60)"


def format_rate(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def validate_override(override_cents: int, child_count: int) -> OverrideCheck:
    """Reject non-positive amounts; accept anything else, with a warning when it looks off."""
    if not isinstance(override_cents, int) or isinstance(override_cents, bool):
        return OverrideCheck(valid=False, reason="Override amount must be a whole number")
    if override_cents <= 0:
        return OverrideCheck(valid=False, reason="Override amount must be positive")
    if override_cents > MAX_EXPECTED_FAMILY_RATE:
        return OverrideCheck(
            valid=True,
            reason=f"Override exceeds typical maximum rate of {format_rate(MAX_EXPECTED_FAMILY_RATE)}",
        )
    calculated = dugsi_family_rate(child_count)
    if calculated > 0 and abs(override_cents - calculated) / calculated > OVERRIDE_WARNING_RATIO:
        return OverrideCheck(
            valid=True,
            reason=f"Override differs significantly from calculated rate ({format_rate(calculated)})",
        )
    return OverrideCheck(valid=True)


def mahad_rate(
    graduation_status: Optional[GraduationStatus],
    payment_frequency: Optional[PaymentFrequency],
    billing_type: Optional[BillingType],
) -> int:
    """Amount per billing cycle; bi-monthly returns the two-month total."""
    if billing_type is None or billing_type == BillingType.EXEMPT:
        return 0

    status = graduation_status or GraduationStatus.NON_GRADUATE
    frequency = payment_frequency or PaymentFrequency.MONTHLY
    rate = MAHAD_BASE_RATES[status][frequency]

    if billing_type == BillingType.PART_TIME:
        rate = rate // 2
    elif billing_type == BillingType.FULL_TIME_SCHOLARSHIP:
        rate -= SCHOLARSHIP_DISCOUNT

    if frequency == PaymentFrequency.BI_MONTHLY:
        rate *= 2
    return rate
