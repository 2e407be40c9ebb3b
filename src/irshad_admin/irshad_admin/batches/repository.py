from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Batch


class BatchRepository(Protocol):
    def list_with_counts(self) -> Sequence[Batch]:
        raise NotImplementedError

    def get_by_id(self, batch_id: str) -> Optional[Batch]:
        raise NotImplementedError

    def assign_student(self, *, student_id: str, batch_id: str) -> bool:
        """False when the student does not exist."""

        raise NotImplementedError

    def move_student(self, *, student_id: str, from_batch_id: str, to_batch_id: str) -> bool:
        """False when the student does not exist or is not in ``from_batch_id``."""

        raise NotImplementedError

    def unassign_student(self, student_id: str) -> tuple[bool, Optional[str]]:
        """Returns (found, previous batch id)."""

        raise NotImplementedError
