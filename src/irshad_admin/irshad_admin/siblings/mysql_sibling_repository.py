from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DetectionMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, new_id
from .model import Sibling, SiblingRelationship
from .repository import SiblingRepository


def _row_to_relationship(r: dict) -> SiblingRelationship:
    return SiblingRelationship(
        id=str(r["id"]),
        person1_id=str(r["person1_id"]),
        person2_id=str(r["person2_id"]),
        detection_method=DetectionMethod(r["detection_method"]),
        is_active=bool(r["is_active"]),
    )


class MySQLSiblingRepository(SiblingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def existing_person_ids(self, person_ids: Sequence[str]) -> set[str]:
        if not person_ids:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id FROM persons WHERE id IN ({in_clause(person_ids)})", tuple(person_ids))
            return {str(r["id"]) for r in fetchall(cur)}

    def find_pair(self, person1_id: str, person2_id: str) -> Optional[SiblingRelationship]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, person1_id, person2_id, detection_method, is_active
                FROM sibling_relationships
                WHERE person1_id=%s AND person2_id=%s
                """,
                (person1_id, person2_id),
            )
            r = fetchone(cur)
            return _row_to_relationship(r) if r else None

    def create(self, *, person1_id: str, person2_id: str, detection_method: DetectionMethod) -> SiblingRelationship:
        rel_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sibling_relationships(id, person1_id, person2_id, detection_method, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (rel_id, person1_id, person2_id, detection_method.value),
            )
        return SiblingRelationship(
            id=rel_id, person1_id=person1_id, person2_id=person2_id, detection_method=detection_method
        )

    def set_active(self, relationship_id: str, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE sibling_relationships SET is_active=%s WHERE id=%s",
                (int(is_active), relationship_id),
            )
            return cur.rowcount > 0

    def siblings_of(self, person_id: str) -> Sequence[Sibling]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sr.id AS relationship_id, sr.detection_method, p.id AS person_id, p.name
                FROM sibling_relationships sr
                JOIN persons p
                  ON p.id = CASE WHEN sr.person1_id=%s THEN sr.person2_id ELSE sr.person1_id END
                WHERE sr.is_active=1 AND (sr.person1_id=%s OR sr.person2_id=%s)
                ORDER BY p.name
                """,
                (person_id, person_id, person_id),
            )
            return [
                Sibling(
                    person_id=str(r["person_id"]),
                    name=r["name"],
                    relationship_id=str(r["relationship_id"]),
                    detection_method=DetectionMethod(r["detection_method"]),
                )
                for r in fetchall(cur)
            ]
