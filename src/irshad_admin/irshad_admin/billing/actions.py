from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import FamilyRateQuery, MahadRateQuery
from .service import BillingService

_log = get_service_logger("billing.actions")


def family_rate(service: BillingService, family_reference_id: str, query: Any) -> ActionResult:
    def _do():
        q = parse_payload(FamilyRateQuery, query)
        return service.family_rate(family_reference_id, override=q.override)

    return run_action(_do, logger=_log, name="family_rate")


def mahad_rate(service: BillingService, query: Any) -> ActionResult:
    def _do():
        q = parse_payload(MahadRateQuery, query)
        return service.mahad_rate(
            graduation_status=q.graduation_status,
            payment_frequency=q.payment_frequency,
            billing_type=q.billing_type,
        )

    return run_action(_do, logger=_log, name="mahad_rate")
