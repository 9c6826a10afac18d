from __future__ import annotations

import json
import uuid
from typing import Any, Mapping, Optional

import mysql.connector
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import IdentityProviderError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_rowcount, fetchone
from .model import Identity
from .provider import IdentityProvider


class MySQLIdentityProvider(IdentityProvider):
    """Identities kept in the `auth_identities` table with werkzeug password hashes."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_identity(row: dict) -> Identity:
        raw = row.get("metadata")
        return Identity(
            identity_id=str(row["id"]),
            email=row["email"],
            metadata=json.loads(raw) if raw else {},
            confirmed=row.get("email_confirmed_at") is not None,
            created_at=row.get("created_at"),
        )

    def _get_row_by_email(self, email: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, email, password_hash, metadata, email_confirmed_at, created_at
                FROM auth_identities
                WHERE email=%s
                """,
                (email.strip().lower(),),
            )
            return fetchone(cur)

    def find_by_email(self, email: str) -> Optional[Identity]:
        row = self._get_row_by_email(email)
        return self._to_identity(row) if row else None

    def create_identity(self, *, email: str, secret: str, metadata: Mapping[str, Any]) -> Identity:
        identity_id = str(uuid.uuid4())
        email = email.strip().lower()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO auth_identities(id, email, password_hash, metadata, email_confirmed_at)
                    VALUES(%s,%s,%s,%s,NOW())
                    """,
                    (identity_id, email, generate_password_hash(secret), json.dumps(dict(metadata))),
                )
        except mysql.connector.IntegrityError as e:
            raise IdentityProviderError(f"An account for {email} already exists") from e
        except mysql.connector.Error as e:
            raise IdentityProviderError(f"Failed to create identity: {e.msg}") from e

        return Identity(identity_id=identity_id, email=email, metadata=dict(metadata), confirmed=True)

    def delete_identity(self, identity_id: str) -> None:
        try:
            execute_rowcount(self._conn_factory, "DELETE FROM auth_identities WHERE id=%s", (identity_id,))
        except mysql.connector.Error as e:
            raise IdentityProviderError(f"Failed to delete identity {identity_id}: {e.msg}") from e

    def verify_credentials(self, *, email: str, secret: str) -> Optional[Identity]:
        row = self._get_row_by_email(email)
        if not row:
            return None
        try:
            ok = check_password_hash(row["password_hash"], secret)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        return self._to_identity(row) if ok else None
