from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_with_email(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_ids(self, student_ids: Sequence[str]) -> Sequence[Student]:
        raise NotImplementedError

    def apply_resolution(
        self,
        *,
        keep_id: str,
        updates: Mapping[str, Any],
        delete_ids: Sequence[str],
    ) -> int:
        """Update the kept record and delete the others in one transaction.

        Returns the number of deleted rows; raises when fewer than
        ``len(delete_ids)`` rows were deleted so nothing is committed.
        """

        raise NotImplementedError
