"""
===============================================================================
USE CASES: Roles (lectura de datos de referencia)
===============================================================================

Business Goal:
    Exponer el catálogo de roles a usuarios autorizados (Admin / Analyst).

Collaborators:
    - RoleRepository.list_roles: solo roles activos, ordenados por id.
    - RoleResolver.resolve: lookup por id con cache.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import RoleRepository
from ....identity.errors import NotFound
from ....identity.roles import RoleResolver
from ..auth.auth_results import RoleView


class ListRolesUseCase:
    def __init__(self, *, repository: RoleRepository) -> None:
        self._roles = repository

    async def execute(self) -> list[RoleView]:
        roles = await self._roles.list_roles()
        return [RoleView(id=r.id, name=r.name) for r in roles]


class GetRoleUseCase:
    def __init__(self, *, resolver: RoleResolver) -> None:
        self._resolver = resolver

    async def execute(self, role_id: int) -> RoleView:
        role = await self._resolver.resolve(role_id)
        if role is None or not role.is_active:
            raise NotFound("Rol no encontrado.")
        return RoleView(id=role.id, name=role.name)
