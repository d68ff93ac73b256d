"""
===============================================================================
TARJETA CRC - identity/roles.py
===============================================================================

Módulo:
    Resolución de roles + cache de vida del proceso

Responsabilidades:
    - Resolver role_id -> Role con cache en memoria.
    - Afirmar que un rol existe y está activo.
    - Permitir invalidar entradas (cambios administrativos de roles).

Colaboradores:
    - domain.repositories.RoleRepository: lookup en el store.
    - identity/guards.py: autorización por nombre de rol.
    - application/usecases/auth: registro (rol default) y login.

Notas:
    - El cache solo guarda roles encontrados; los ids inexistentes siempre
      vuelven a consultar el store.
    - Dos resoluciones concurrentes del mismo id pueden ir ambas al store;
      la última escritura gana (idempotente).
===============================================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Optional

from ..domain.entities import Role
from ..domain.repositories import RoleRepository
from .errors import RoleInactive, RoleNotFound


class RoleCache:
    """Mapa role_id -> Role, thread-safe, propiedad del composition root."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._roles: dict[int, Role] = {}

    def get(self, role_id: int) -> Optional[Role]:
        with self._lock:
            return self._roles.get(role_id)

    def put(self, role: Role) -> None:
        with self._lock:
            self._roles[role.id] = role

    def invalidate(self, role_id: int) -> None:
        with self._lock:
            self._roles.pop(role_id, None)

    def clear(self) -> None:
        with self._lock:
            self._roles.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._roles)


class RoleResolver:
    def __init__(self, repository: RoleRepository, cache: RoleCache) -> None:
        self._repository = repository
        self._cache = cache

    async def resolve(self, role_id: int) -> Optional[Role]:
        """Rol por id (activo o no); None si no existe."""
        cached = self._cache.get(role_id)
        if cached is not None:
            return cached

        role = await self._repository.get_role_by_id(role_id)
        if role is not None:
            self._cache.put(role)
        return role

    async def assert_active(self, role_id: int) -> Role:
        role = await self.resolve(role_id)
        if role is None:
            raise RoleNotFound(role_id)
        if not role.is_active:
            raise RoleInactive(role_id)
        return role
