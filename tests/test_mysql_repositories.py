from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest

from src.school_admin.school_admin.container import build_container
from src.school_admin.school_admin.core.enums import RequestStatus, Role
from src.school_admin.school_admin.core.exceptions import IdentityProviderError
from src.school_admin.school_admin.database.mysql_base import db_cursor
from src.school_admin.school_admin.identity.mysql_identity_provider import MySQLIdentityProvider
from src.school_admin.school_admin.registrations.mysql_registration_repository import MySQLRegistrationRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = conn.rowcount
        self.lastrowid = None
        self.closed = False

    def execute(self, sql, params=()):
        if self._conn.raise_on_execute is not None:
            raise self._conn.raise_on_execute
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, *, rows=None, rowcount=1, raise_on_execute=None):
        self.rows = rows or []
        self.rowcount = rowcount
        self.raise_on_execute = raise_on_execute
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self.last_cursor = None

    def cursor(self, dictionary=True):
        self.last_cursor = FakeCursor(self)
        return self.last_cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    database = "school_admin_test"

    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


ROW = {
    "id": "r-1",
    "name": "Karim",
    "email": "karim@x.com",
    "role": "student",
    "class_name": "6-A",
    "subject": None,
    "status": "pending",
    "created_at": datetime(2026, 3, 1, 8, 0),
    "approved_at": None,
    "approved_by": None,
}


def test_pending_listing_filters_roles_in_the_query():
    conn = FakeConnection(rows=[ROW])
    repo = MySQLRegistrationRepository(FakeFactory(conn))

    rows = repo.list_requests(status=RequestStatus.PENDING, limit=10)

    sql, params = conn.executed[0]
    assert "role IN (%s,%s)" in sql
    assert "ORDER BY created_at DESC" in sql
    assert params == ("student", "teacher", "pending", 10)
    assert rows[0].role == Role.STUDENT
    assert rows[0].class_name == "6-A"


def test_status_updates_only_touch_pending_rows():
    conn = FakeConnection(rowcount=0)
    repo = MySQLRegistrationRepository(FakeFactory(conn))

    ok = repo.mark_approved(request_id="r-1", approved_by="admin-1", approved_at=datetime(2026, 3, 2))

    sql, params = conn.executed[0]
    assert "WHERE id=%s AND status=%s" in sql
    assert params[-1] == "pending"
    assert ok is False


def test_failed_statement_rolls_back():
    conn = FakeConnection(raise_on_execute=RuntimeError("boom"))
    repo = MySQLRegistrationRepository(FakeFactory(conn))

    try:
        repo.mark_rejected(request_id="r-1")
    except RuntimeError:
        pass

    assert conn.rolled_back is True
    assert conn.committed is False


def test_db_cursor_rolls_back_and_closes_on_error():
    conn = FakeConnection()

    with pytest.raises(ValueError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT INTO profiles VALUES (%s)", ("p-1",))
            raise ValueError("constraint")

    assert conn.rolled_back is True
    assert conn.committed is False
    assert conn.last_cursor.closed is True
    assert conn.closed is True


def test_db_cursor_commits_and_closes_on_success():
    conn = FakeConnection()

    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed is True
    assert conn.rolled_back is False
    assert conn.last_cursor.closed is True
    assert conn.closed is True


def test_containers_keep_their_own_database():
    base = {"host": "db", "user": "app", "password": "pw"}

    first = build_container(db_config={**base, "database": "school_a"})
    second = build_container(db_config={**base, "database": "school_b"})

    assert first.conn.database == "school_a"
    assert second.conn.database == "school_b"


def test_local_identity_duplicate_email_is_provider_error():
    err = mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062)
    provider = MySQLIdentityProvider(FakeFactory(FakeConnection(raise_on_execute=err)))

    try:
        provider.create_identity(email="karim@x.com", secret="pw", metadata={})
    except IdentityProviderError as e:
        assert "already exists" in str(e)
    else:
        raise AssertionError("expected IdentityProviderError")


def test_local_identity_verifies_werkzeug_hash():
    from werkzeug.security import generate_password_hash

    row = {
        "id": "u-1",
        "email": "karim@x.com",
        "password_hash": generate_password_hash("right-pass"),
        "metadata": '{"role": "student"}',
        "email_confirmed_at": datetime(2026, 3, 1),
        "created_at": datetime(2026, 3, 1),
    }
    provider = MySQLIdentityProvider(FakeFactory(FakeConnection(rows=[row])))

    identity = provider.verify_credentials(email="karim@x.com", secret="right-pass")

    assert identity.identity_id == "u-1"
    assert identity.metadata == {"role": "student"}
    assert provider.verify_credentials(email="karim@x.com", secret="wrong") is None
