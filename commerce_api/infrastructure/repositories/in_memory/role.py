"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/role.py
============================================================
Class: InMemoryRoleRepository

Responsibilities:
  - Guardar roles en memoria (tests / APP_ENV=test).
  - Sembrar los mismos roles que la migración 001.
  - Permitir altas / (des)activaciones para escenarios de test.

Constraints:
  - Thread-safe: acceso protegido por Lock.
  - Misma semántica que Postgres: get devuelve inactivos, list solo activos.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, Iterable, List, Optional

from ....domain.entities import ROLE_ADMIN, ROLE_ANALYST, ROLE_SELLER, ROLE_USER, Role

DEFAULT_ROLES: tuple[Role, ...] = (
    Role(id=1, name=ROLE_ADMIN),
    Role(id=2, name=ROLE_USER),
    Role(id=3, name=ROLE_SELLER),
    Role(id=4, name=ROLE_ANALYST),
)


class InMemoryRoleRepository:
    def __init__(self, roles: Iterable[Role] | None = None) -> None:
        self._lock = Lock()
        seed = DEFAULT_ROLES if roles is None else roles
        self._roles: Dict[int, Role] = {r.id: r for r in seed}
        self.lookups = 0

    async def get_role_by_id(self, role_id: int) -> Optional[Role]:
        with self._lock:
            # R: contador para verificar hits de cache en tests.
            self.lookups += 1
            return self._roles.get(role_id)

    async def list_roles(self) -> List[Role]:
        with self._lock:
            return sorted(
                (r for r in self._roles.values() if r.is_active), key=lambda r: r.id
            )

    async def ping(self) -> bool:
        return True

    def add_role(self, role: Role) -> None:
        with self._lock:
            self._roles[role.id] = role

    def set_role_active(self, role_id: int, is_active: bool) -> None:
        with self._lock:
            role = self._roles[role_id]
            self._roles[role_id] = replace(role, is_active=is_active)
