from __future__ import annotations

import pytest

from src.irshad_admin.irshad_admin.billing.service import BillingService
from src.irshad_admin.irshad_admin.billing.tuition import (
    dugsi_family_rate,
    dugsi_rate_breakdown,
    dugsi_tier_description,
    format_rate,
    mahad_rate,
    validate_override,
)
from src.irshad_admin.irshad_admin.core.enums import BillingType, GraduationStatus, PaymentFrequency
from src.irshad_admin.irshad_admin.core.exceptions import ValidationError
from tests.fakes import InMemoryBilling


@pytest.mark.parametrize("children, cents", [(0, 0), (1, 8000), (2, 16000), (3, 23000), (5, 35000)])
def test_dugsi_family_rate_tiers(children, cents):
    assert dugsi_family_rate(children) == cents


def test_breakdown_and_description_for_large_family():
    b = dugsi_rate_breakdown(4)

    assert (b.first_two, b.third, b.fourth_plus, b.total) == (16000, 7000, 6000, 29000)
    assert dugsi_tier_description(4) == "4 children (2 at $80, 1 at $70, 1 at $60)"
    assert format_rate(29000) == "$290.00"
    assert format_rate(123456) == "$1,234.56"


def test_override_checks():
    assert validate_override(0, 2).valid is False
    assert validate_override(-5, 2).valid is False
    assert validate_override(16000, 2).reason is None
    far_off = validate_override(30000, 2)
    assert far_off.valid and "differs significantly" in far_off.reason
    huge = validate_override(70000, 2)
    assert huge.valid and "$650.00" in huge.reason


@pytest.mark.parametrize(
    "status, frequency, billing_type, cents",
    [
        (GraduationStatus.NON_GRADUATE, PaymentFrequency.MONTHLY, BillingType.FULL_TIME, 12000),
        (GraduationStatus.GRADUATE, PaymentFrequency.MONTHLY, BillingType.FULL_TIME, 9500),
        (GraduationStatus.NON_GRADUATE, PaymentFrequency.BI_MONTHLY, BillingType.FULL_TIME, 22000),
        (GraduationStatus.NON_GRADUATE, PaymentFrequency.MONTHLY, BillingType.FULL_TIME_SCHOLARSHIP, 9000),
        (GraduationStatus.GRADUATE, PaymentFrequency.MONTHLY, BillingType.PART_TIME, 4750),
        (GraduationStatus.GRADUATE, PaymentFrequency.MONTHLY, BillingType.EXEMPT, 0),
        (None, None, None, 0),
    ],
)
def test_mahad_rate(status, frequency, billing_type, cents):
    assert mahad_rate(status, frequency, billing_type) == cents


def test_family_rate_service_applies_override():
    svc = BillingService(InMemoryBilling(children_by_family={"F1": 3}))

    plain = svc.family_rate("F1")
    overridden = svc.family_rate("F1", override=20000)

    assert (plain.child_count, plain.rate, plain.formatted) == (3, 23000, "$230.00")
    assert overridden.rate == 20000 and overridden.override_warning is None
    assert overridden.breakdown.total == 23000
    with pytest.raises(ValidationError):
        svc.family_rate("F1", override=0)
