"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/role.py
============================================================
Class: PostgresRoleRepository

Responsibilities:
  - Leer roles (datos de referencia sembrados por migración).
  - Mapear filas -> entidad `Role`.
  - Exponer ping() para el health check.

Collaborators:
  - psycopg_pool.AsyncConnectionPool
  - domain.entities.Role
  - crosscutting.exceptions.PersistenceError

Constraints:
  - get_role_by_id devuelve roles inactivos (el resolver decide).
  - list_roles devuelve solo activos, ordenados por id.
============================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import psycopg

from ....crosscutting.exceptions import PersistenceError
from ....crosscutting.logger import logger
from ....domain.entities import Role
from ...db.errors import DatabasePoolError

if TYPE_CHECKING:
    from psycopg_pool import AsyncConnectionPool

_ROLE_COLUMNS = "id, name, is_active"


def _row_to_role(row: tuple) -> Role:
    return Role(id=row[0], name=row[1], is_active=row[2])


class PostgresRoleRepository:
    """R: Implementación PostgreSQL del repositorio de roles."""

    def __init__(self, pool: Optional["AsyncConnectionPool"] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> "AsyncConnectionPool":
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    async def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            async with pool.connection() as conn:
                cur = await conn.execute(query, tuple(params))
                return await cur.fetchall()
        except (psycopg.Error, DatabasePoolError) as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise PersistenceError(context_msg, original_error=exc) from exc

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

    async def get_role_by_id(self, role_id: int) -> Optional[Role]:
        row = await self._fetchone(
            query=f"SELECT {_ROLE_COLUMNS} FROM roles WHERE id = %s",
            params=(role_id,),
            context_msg="PostgresRoleRepository: get_role_by_id failed",
            extra={"role_id": role_id},
        )
        return _row_to_role(row) if row else None

    async def list_roles(self) -> list[Role]:
        rows = await self._fetchall(
            query=f"""
                SELECT {_ROLE_COLUMNS}
                FROM roles
                WHERE is_active = TRUE
                ORDER BY id ASC
            """,
            params=(),
            context_msg="PostgresRoleRepository: list_roles failed",
            extra={},
        )
        return [_row_to_role(r) for r in rows]

    async def ping(self) -> bool:
        """R: Health check. Nunca lanza: False si la DB no responde."""
        try:
            row = await self._fetchone(
                query="SELECT 1",
                params=(),
                context_msg="PostgresRoleRepository: ping failed",
                extra={},
            )
        except PersistenceError:
            return False
        return bool(row)
