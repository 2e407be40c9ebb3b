from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Batch:
    """Mahad cohort; ``student_count`` counts students currently placed in it."""

    id: str
    name: str
    start_date: Optional[date]
    end_date: Optional[date]
    student_count: int = 0


@dataclass(frozen=True)
class AssignResult:
    batch_id: str
    assigned_count: int
    failed_assignments: tuple[str, ...] = ()

    def failure_message(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class TransferResult:
    from_batch_id: str
    to_batch_id: str
    transferred_count: int
    failed_transfers: tuple[str, ...] = ()

    def failure_message(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class UnassignResult:
    unassigned_count: int
    failed_unassignments: tuple[str, ...] = ()
    affected_batch_ids: tuple[str, ...] = ()

    def failure_message(self) -> Optional[str]:
        if not self.failed_unassignments:
            return None
        return f"Failed to unassign {len(self.failed_unassignments)} student(s)"
