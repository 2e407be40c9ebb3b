from __future__ import annotations

from typing import Protocol


class BillingRepository(Protocol):
    def count_active_dugsi_children(self, family_reference_id: str) -> int:
        raise NotImplementedError
