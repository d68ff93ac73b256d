"""
===============================================================================
TARJETA CRC - identity/guards.py
===============================================================================

Módulo:
    Guards de autenticación / autorización (dependencias FastAPI)

Responsabilidades:
    - require_auth(): bearer token -> TokenClaims en request.state.claims.
    - require_roles(*names): claims.role_id -> Role -> nombre en allow-list.

Colaboradores:
    - identity/tokens.TokenService (vía container.get_token_service).
    - identity/roles.RoleResolver (vía container.get_role_resolver).
    - identity/errors: Unauthorized / Forbidden.

Notas:
    - Los mensajes al cliente no distinguen firma inválida de expiración.
    - Un rol inexistente o inactivo se trata como acceso denegado.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..container import get_role_resolver, get_token_service
from ..context import bind_context
from ..crosscutting.logger import logger
from ..domain.entities import Role
from .errors import Forbidden, RoleError, TokenError, Unauthorized
from .roles import RoleResolver
from .tokens import TokenClaims, TokenService

MSG_TOKEN_REQUIRED = "Token requerido."
MSG_TOKEN_INVALID = "Token inválido o expirado."
MSG_ROLE_DENIED = "No tiene permisos para acceder a este recurso."


async def _authenticate(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    token = TokenService.extract_from_header(authorization)
    if not token:
        raise Unauthorized(MSG_TOKEN_REQUIRED)

    try:
        claims = tokens.verify(token)
    except TokenError as exc:
        logger.warning(
            "Token rechazado",
            extra={"reason": type(exc).__name__},
        )
        raise Unauthorized(MSG_TOKEN_INVALID) from exc

    request.state.claims = claims
    bind_context(account_id=claims.account_id)
    return claims


def require_auth() -> Callable:
    """Dependency FastAPI: requiere un access token válido.

    Devuelve siempre la misma función para que FastAPI la resuelva una sola
    vez por request aunque varias rutas / guards la declaren.
    """
    return _authenticate


def require_roles(*names: str) -> Callable:
    """Dependency FastAPI: requiere que el rol del token esté en `names`."""
    allowed = frozenset(names)
    if not allowed:
        raise ValueError("require_roles necesita al menos un rol")

    async def dependency(
        request: Request,
        claims: TokenClaims = Depends(require_auth()),
        roles: RoleResolver = Depends(get_role_resolver),
    ) -> Role:
        try:
            role = await roles.assert_active(claims.role_id)
        except RoleError as exc:
            logger.warning(
                "Autorización denegada: rol no resoluble",
                extra={"account_id": claims.account_id, "role_id": claims.role_id},
            )
            raise Forbidden(MSG_ROLE_DENIED) from exc

        if role.name not in allowed:
            logger.warning(
                "Autorización denegada: rol insuficiente",
                extra={"account_id": claims.account_id, "role": role.name},
            )
            raise Forbidden(MSG_ROLE_DENIED)

        request.state.role = role
        return role

    return dependency
