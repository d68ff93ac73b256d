"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/account.py
============================================================
Class: PostgresAccountRepository

Responsibilities:
  - Cargar cuenta + perfil + rol en un solo round trip (login / perfil).
  - Crear cuenta (access) y perfil (users) dentro de una transacción.
  - Soft (de)activación de cuentas.
  - Mapear filas crudas -> entidades de dominio.
  - Traducir violaciones de unicidad concurrentes a errores de dominio.

Collaborators:
  - psycopg (AsyncConnection, errors.UniqueViolation)
  - psycopg_pool.AsyncConnectionPool
  - domain.entities (Account, Profile, Role, composed shapes)
  - identity.errors (DuplicateDocument, DuplicateEmail)
  - crosscutting.exceptions.PersistenceError

Constraints / Notes:
  - Retorna None cuando no existe el recurso (no exception por “not found”).
  - SQL parametrizado siempre.
  - Las constraints `uq_access_document` / `uq_users_email` (migración 001)
    son la última línea de defensa contra registros concurrentes.
============================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import psycopg
from psycopg import errors as pg_errors

from ....crosscutting.exceptions import PersistenceError
from ....crosscutting.logger import logger
from ....domain.entities import (
    Account,
    AccountWithProfile,
    NewAccount,
    NewProfile,
    Profile,
    ProfileWithRole,
    Role,
)
from ....identity.errors import DuplicateDocument, DuplicateEmail
from ...db.errors import DatabasePoolError

if TYPE_CHECKING:
    from psycopg_pool import AsyncConnectionPool

# R: Listas explícitas de columnas (contrato estable con migraciones).
_ACCOUNT_COLUMNS = "id, document, password_hash, role_id, is_active, created_at"
_PROFILE_COLUMNS = "id, access_id, fullname, email, birth_date, is_active"

_JOINED_COLUMNS = """
    a.id, a.document, a.password_hash, a.role_id, a.is_active, a.created_at,
    u.id, u.access_id, u.fullname, u.email, u.birth_date, u.is_active,
    r.id, r.name, r.is_active
"""

_CONSTRAINT_DOCUMENT = "uq_access_document"
_CONSTRAINT_EMAIL = "uq_users_email"


# ============================================================
# Mapping
# ============================================================
def _row_to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        document=row[1],
        password_hash=row[2],
        role_id=row[3],
        is_active=row[4],
        created_at=row[5],
    )


def _row_to_profile(row: tuple) -> Optional[Profile]:
    if row[0] is None:
        return None
    return Profile(
        id=row[0],
        access_id=row[1],
        fullname=row[2],
        email=row[3],
        birth_date=row[4],
        is_active=row[5],
    )


def _row_to_role(row: tuple) -> Optional[Role]:
    if row[0] is None:
        return None
    return Role(id=row[0], name=row[1], is_active=row[2])


def _split_joined(row: tuple) -> tuple[Account, Optional[Profile], Optional[Role]]:
    return (
        _row_to_account(row[0:6]),
        _row_to_profile(row[6:12]),
        _row_to_role(row[12:15]),
    )


class PostgresAccountRepository:
    """R: Implementación PostgreSQL del store de credenciales."""

    def __init__(self, pool: Optional["AsyncConnectionPool"] = None):
        self._pool = pool

    def _get_pool(self) -> "AsyncConnectionPool":
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    async def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            async with pool.connection() as conn:
                cur = await conn.execute(query, tuple(params))
                return await cur.fetchone()
        except (psycopg.Error, DatabasePoolError) as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise PersistenceError(context_msg, original_error=exc) from exc

    # =========================================================
    # Lecturas
    # =========================================================
    async def get_account_with_profile_by_document(
        self, document: str
    ) -> Optional[AccountWithProfile]:
        row = await self._fetchone(
            query=f"""
                SELECT {_JOINED_COLUMNS}
                FROM access a
                LEFT JOIN users u ON u.access_id = a.id
                LEFT JOIN roles r ON r.id = a.role_id
                WHERE a.document = %s
            """,
            params=(document,),
            context_msg="PostgresAccountRepository: get_account_with_profile_by_document failed",
            extra={"document": document},
        )
        if not row:
            return None
        account, profile, role = _split_joined(row)
        return AccountWithProfile(account=account, profile=profile, role=role)

    async def get_profile_by_email(self, email: str) -> Optional[Profile]:
        row = await self._fetchone(
            query=f"SELECT {_PROFILE_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            context_msg="PostgresAccountRepository: get_profile_by_email failed",
            extra={},
        )
        return _row_to_profile(row) if row else None

    async def get_profile_with_role_by_account_id(
        self, account_id: int
    ) -> Optional[ProfileWithRole]:
        row = await self._fetchone(
            query=f"""
                SELECT {_JOINED_COLUMNS}
                FROM access a
                JOIN users u ON u.access_id = a.id
                LEFT JOIN roles r ON r.id = a.role_id
                WHERE a.id = %s
            """,
            params=(account_id,),
            context_msg="PostgresAccountRepository: get_profile_with_role_by_account_id failed",
            extra={"account_id": account_id},
        )
        if not row:
            return None
        account, profile, role = _split_joined(row)
        if profile is None:
            return None
        return ProfileWithRole(profile=profile, account=account, role=role)

    # =========================================================
    # Escrituras
    # =========================================================
    async def create_account_with_profile(
        self, account: NewAccount, profile: NewProfile
    ) -> tuple[Account, Profile]:
        try:
            pool = self._get_pool()
            async with pool.connection() as conn:
                async with conn.transaction():
                    cur = await conn.execute(
                        f"""
                        INSERT INTO access (document, password_hash, role_id, is_active)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {_ACCOUNT_COLUMNS}
                        """,
                        (
                            account.document,
                            account.password_hash,
                            account.role_id,
                            account.is_active,
                        ),
                    )
                    created_account = _row_to_account(await cur.fetchone())

                    cur = await conn.execute(
                        f"""
                        INSERT INTO users (access_id, fullname, email, birth_date, is_active)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {_PROFILE_COLUMNS}
                        """,
                        (
                            created_account.id,
                            profile.fullname,
                            profile.email,
                            profile.birth_date,
                            profile.is_active,
                        ),
                    )
                    created_profile = _row_to_profile(await cur.fetchone())
        except pg_errors.UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None)
            logger.warning(
                "PostgresAccountRepository: unique violation on create",
                extra={"document": account.document, "constraint": constraint},
            )
            if constraint == _CONSTRAINT_EMAIL:
                raise DuplicateEmail() from exc
            if constraint == _CONSTRAINT_DOCUMENT:
                raise DuplicateDocument() from exc
            raise PersistenceError(
                "PostgresAccountRepository: create_account_with_profile failed",
                original_error=exc,
            ) from exc
        except (psycopg.Error, DatabasePoolError) as exc:
            logger.exception(
                "PostgresAccountRepository: create_account_with_profile failed",
                extra={"document": account.document, "error": str(exc)},
            )
            raise PersistenceError(
                "PostgresAccountRepository: create_account_with_profile failed",
                original_error=exc,
            ) from exc

        if created_profile is None:
            raise PersistenceError("PostgresAccountRepository: profile insert returned no row")
        return created_account, created_profile

    async def set_account_active(
        self, account_id: int, is_active: bool
    ) -> Optional[Account]:
        row = await self._fetchone(
            query=f"""
                UPDATE access
                SET is_active = %s
                WHERE id = %s
                RETURNING {_ACCOUNT_COLUMNS}
            """,
            params=(is_active, account_id),
            context_msg="PostgresAccountRepository: set_account_active failed",
            extra={"account_id": account_id, "is_active": is_active},
        )
        return _row_to_account(row) if row else None
