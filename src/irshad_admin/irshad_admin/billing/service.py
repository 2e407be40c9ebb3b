from __future__ import annotations

from typing import Optional

from ..core.enums import BillingType, GraduationStatus, PaymentFrequency
from ..core.exceptions import ValidationError
from .model import FamilyRate, MahadRate
from .repository import BillingRepository
from .tuition import (
    dugsi_family_rate,
    dugsi_rate_breakdown,
    dugsi_tier_description,
    format_rate,
    mahad_rate,
    validate_override,
)


class BillingService:
    def __init__(self, billing: BillingRepository):
        self._billing = billing

    def family_rate(self, family_reference_id: str, *, override: Optional[int] = None) -> FamilyRate:
        children = self._billing.count_active_dugsi_children(family_reference_id)
        warning = None
        rate = dugsi_family_rate(children)
        if override is not None:
            check = validate_override(override, children)
            if not check.valid:
                raise ValidationError(check.reason or "Invalid override amount")
            warning = check.reason
            rate = override
        return FamilyRate(
            family_reference_id=family_reference_id,
            child_count=children,
            rate=rate,
            formatted=format_rate(rate),
            description=dugsi_tier_description(children),
            breakdown=dugsi_rate_breakdown(children),
            override_warning=warning,
        )

    def mahad_rate(
        self,
        *,
        graduation_status: Optional[GraduationStatus],
        payment_frequency: Optional[PaymentFrequency],
        billing_type: Optional[BillingType],
    ) -> MahadRate:
        rate = mahad_rate(graduation_status, payment_frequency, billing_type)
        return MahadRate(rate=rate, formatted=format_rate(rate))
