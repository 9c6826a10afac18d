from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_rowcount, fetchall, fetchone
from .model import PendingRequest
from .repository import RegistrationRepository

_COLUMNS = "id, name, email, role, class_name, subject, status, created_at, approved_at, approved_by"
_SELF_REGISTRATION_ROLES = (Role.STUDENT.value, Role.TEACHER.value)


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_request(r: dict) -> PendingRequest:
        return PendingRequest(
            request_id=str(r["id"]),
            name=r["name"],
            email=r["email"],
            role=Role(r["role"]),
            status=RequestStatus(r["status"]),
            created_at=r["created_at"],
            class_name=r.get("class_name"),
            subject=r.get("subject"),
            approved_at=r.get("approved_at"),
            approved_by=r.get("approved_by"),
        )

    def create(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        class_name: Optional[str],
        subject: Optional[str],
    ) -> PendingRequest:
        request_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pending_requests(id, name, email, role, class_name, subject, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (request_id, name, email, role.value, class_name, subject, RequestStatus.PENDING.value),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM pending_requests WHERE id=%s", (request_id,))
            return self._to_request(fetchone(cur))

    def get(self, *, request_id: str) -> Optional[PendingRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM pending_requests WHERE id=%s AND role IN (%s,%s)",
                (request_id, *_SELF_REGISTRATION_ROLES),
            )
            r = fetchone(cur)
            return self._to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[PendingRequest]:
        # Role filtering belongs to the query, never to the caller.
        clauses = ["role IN (%s,%s)"]
        params: list[object] = list(_SELF_REGISTRATION_ROLES)

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM pending_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [self._to_request(r) for r in fetchall(cur)]

    def mark_approved(self, *, request_id: str, approved_by: str, approved_at: datetime) -> bool:
        updated = execute_rowcount(
            self._conn_factory,
            """
            UPDATE pending_requests
            SET status=%s, approved_at=%s, approved_by=%s
            WHERE id=%s AND status=%s
            """,
            (
                RequestStatus.APPROVED.value,
                approved_at,
                approved_by,
                request_id,
                RequestStatus.PENDING.value,
            ),
        )
        return updated > 0

    def mark_rejected(self, *, request_id: str) -> bool:
        updated = execute_rowcount(
            self._conn_factory,
            "UPDATE pending_requests SET status=%s WHERE id=%s AND status=%s",
            (RequestStatus.REJECTED.value, request_id, RequestStatus.PENDING.value),
        )
        return updated > 0
