"""
Name: PostgreSQL Repository Tests (no database)

Responsibilities:
  - Row -> entity mapping for composed JOIN rows
  - UniqueViolation constraint -> DuplicateDocument / DuplicateEmail
  - Driver failures wrapped in PersistenceError
  - ping() never raises

Notes:
  - Uses a fake async pool; SQL itself is exercised against a real DB only.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import psycopg
import pytest
from psycopg import errors as pg_errors

from commerce_api.crosscutting.exceptions import PersistenceError
from commerce_api.domain.entities import NewAccount, NewProfile
from commerce_api.identity.errors import DuplicateDocument, DuplicateEmail
from commerce_api.infrastructure.repositories.postgres import (
    PostgresAccountRepository,
    PostgresRoleRepository,
)

pytestmark = pytest.mark.unit

_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class _FakeCursor:
    def __init__(self, rows):
        self._rows = list(rows)

    async def fetchone(self):
        return self._rows[0] if self._rows else None

    async def fetchall(self):
        return self._rows


class _FakeTransaction:
    def __init__(self):
        self.exit_exc: BaseException | None = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        # R: psycopg hace rollback cuando el bloque sale con excepción
        self.exit_exc = exc
        return False


class _FakeConnection:
    def __init__(self, results):
        # R: each execute() pops the next result (rows list or exception)
        self._results = list(results)
        self.queries: list[tuple[str, tuple]] = []
        self.transactions: list[_FakeTransaction] = []

    async def execute(self, query, params=()):
        self.queries.append((query, params))
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return _FakeCursor(result)

    def transaction(self):
        tx = _FakeTransaction()
        self.transactions.append(tx)
        return tx


class _FakeConnectionContext:
    def __init__(self, conn):
        self._conn = conn

    async def __aenter__(self):
        return self._conn

    async def __aexit__(self, *exc):
        return False


class _FakePool:
    def __init__(self, *results):
        self.conn = _FakeConnection(results)

    def connection(self):
        return _FakeConnectionContext(self.conn)


def _unique_violation(constraint: str) -> pg_errors.UniqueViolation:
    class _Violation(pg_errors.UniqueViolation):
        @property
        def diag(self):
            return SimpleNamespace(constraint_name=constraint)

    return _Violation("duplicate key value violates unique constraint")


_JOINED_ROW = (
    1, "D1", "$argon2id$hash", 2, True, _NOW,
    10, 1, "A B", "a@b.com", None, True,
    2, "User", True,
)


@pytest.mark.asyncio
async def test_joined_row_maps_to_account_with_profile():
    repo = PostgresAccountRepository(pool=_FakePool([_JOINED_ROW]))

    found = await repo.get_account_with_profile_by_document("D1")

    assert found.account.id == 1
    assert found.account.document == "D1"
    assert found.profile.id == 10
    assert found.profile.access_id == 1
    assert found.role.name == "User"
    assert repo._pool.conn.queries[0][1] == ("D1",)


@pytest.mark.asyncio
async def test_account_without_profile_maps_profile_to_none():
    row = _JOINED_ROW[:6] + (None,) * 6 + _JOINED_ROW[12:]
    repo = PostgresAccountRepository(pool=_FakePool([row]))

    found = await repo.get_account_with_profile_by_document("D1")

    assert found.profile is None
    assert found.role is not None


@pytest.mark.asyncio
async def test_missing_row_returns_none():
    repo = PostgresAccountRepository(pool=_FakePool([]))

    assert await repo.get_profile_with_role_by_account_id(1) is None


@pytest.mark.asyncio
async def test_create_returns_both_rows():
    account_row = (1, "D1", "$argon2id$hash", 2, True, _NOW)
    profile_row = (10, 1, "A B", "a@b.com", None, True)
    repo = PostgresAccountRepository(pool=_FakePool([account_row], [profile_row]))

    account, profile = await repo.create_account_with_profile(
        NewAccount(document="D1", password_hash="$argon2id$hash", role_id=2),
        NewProfile(fullname="A B", email="a@b.com"),
    )

    assert account.id == 1
    assert profile.access_id == 1
    # R: profile insert references the freshly created account id
    assert repo._pool.conn.queries[1][1][0] == 1


@pytest.mark.asyncio
async def test_profile_insert_failure_rolls_back_account():
    account_row = (1, "D1", "$argon2id$hash", 2, True, _NOW)
    failure = psycopg.OperationalError("connection lost")
    repo = PostgresAccountRepository(pool=_FakePool([account_row], failure))

    with pytest.raises(PersistenceError):
        await repo.create_account_with_profile(
            NewAccount(document="D1", password_hash="h", role_id=2),
            NewProfile(fullname="A B", email="a@b.com"),
        )

    conn = repo._pool.conn
    assert len(conn.queries) == 2
    assert len(conn.transactions) == 1
    assert conn.transactions[0].exit_exc is failure


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "constraint,expected",
    [("uq_access_document", DuplicateDocument), ("uq_users_email", DuplicateEmail)],
)
async def test_unique_violation_maps_to_domain_error(constraint, expected):
    repo = PostgresAccountRepository(pool=_FakePool(_unique_violation(constraint)))

    with pytest.raises(expected):
        await repo.create_account_with_profile(
            NewAccount(document="D1", password_hash="h", role_id=2),
            NewProfile(fullname="A B", email="a@b.com"),
        )


@pytest.mark.asyncio
async def test_driver_error_is_wrapped():
    repo = PostgresAccountRepository(pool=_FakePool(psycopg.OperationalError("connection refused")))

    with pytest.raises(PersistenceError) as exc_info:
        await repo.get_profile_by_email("a@b.com")

    assert "connection refused" not in exc_info.value.message


@pytest.mark.asyncio
async def test_role_repository_list_and_ping():
    repo = PostgresRoleRepository(pool=_FakePool([(1, "Admin", True), (2, "User", True)], [(1,)]))

    roles = await repo.list_roles()

    assert [r.name for r in roles] == ["Admin", "User"]
    assert await repo.ping() is True


@pytest.mark.asyncio
async def test_role_ping_returns_false_on_failure():
    repo = PostgresRoleRepository(pool=_FakePool(psycopg.OperationalError("down")))

    assert await repo.ping() is False
