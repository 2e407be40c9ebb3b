from __future__ import annotations

from typing import Optional

from ..common.schemas import CommandModel
from ..core.enums import BillingType, GraduationStatus, PaymentFrequency


class FamilyRateQuery(CommandModel):
    override: Optional[int] = None


class MahadRateQuery(CommandModel):
    graduation_status: Optional[GraduationStatus] = None
    payment_frequency: Optional[PaymentFrequency] = None
    billing_type: Optional[BillingType] = None
