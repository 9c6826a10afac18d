from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "id, name, email, role, class_name, subject, created_at, updated_at"


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_profile(r: dict) -> Profile:
        return Profile(
            profile_id=str(r["id"]),
            name=r["name"],
            email=r["email"],
            role=Role(r["role"]),
            class_name=r.get("class_name"),
            subject=r.get("subject"),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            r = fetchone(cur)
            return self._to_profile(r) if r else None

    def create(
        self,
        *,
        profile_id: str,
        name: str,
        email: str,
        role: Role,
        class_name: Optional[str],
        subject: Optional[str],
    ) -> Profile:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(id, name, email, role, class_name, subject)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (profile_id, name, email.strip().lower(), role.value, class_name, subject),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            return self._to_profile(fetchone(cur))

    def list_by_role(self, *, role: Optional[Role] = None, limit: int = 500) -> Sequence[Profile]:
        clauses = ["1=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM profiles
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [self._to_profile(r) for r in fetchall(cur)]
