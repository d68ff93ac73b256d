"""
===============================================================================
USE CASE: Get Profile
===============================================================================

Business Goal:
    Devolver el perfil del titular de un token ya verificado, con su rol.

Error Mapping:
    - NotFound: la cuenta/perfil ya no existe o su rol no se puede resolver.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import AccountRepository
from ....identity.errors import NotFound
from ....identity.roles import RoleResolver
from ....identity.tokens import TokenClaims
from .auth_results import ProfileView, to_profile_view

MSG_PROFILE_NOT_FOUND = "Usuario o rol no encontrado."


class GetProfileUseCase:
    def __init__(self, *, accounts: AccountRepository, roles: RoleResolver) -> None:
        self._accounts = accounts
        self._roles = roles

    async def execute(self, claims: TokenClaims) -> ProfileView:
        found = await self._accounts.get_profile_with_role_by_account_id(
            claims.account_id
        )
        if found is None:
            raise NotFound(MSG_PROFILE_NOT_FOUND)

        # R: el rol viene del join; si faltara, se consulta vía resolver (cache).
        role = found.role or await self._roles.resolve(found.account.role_id)
        if role is None:
            raise NotFound(MSG_PROFILE_NOT_FOUND)

        return to_profile_view(found, role)
