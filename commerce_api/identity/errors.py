"""
===============================================================================
TARJETA CRC - identity/errors.py
===============================================================================

Módulo:
    Taxonomía de errores de autenticación / autorización

Responsabilidades:
    - Representar cada falla de los flujos de auth con un tipo propio.
    - Transportar el código estable (error_code) y el status HTTP sugerido.
    - Transportar detalle por campo (validación / password débil).

Colaboradores:
    - crosscutting.exceptions.ServiceError (base).
    - api/exception_handlers.py: traduce AuthError -> RFC7807.
    - application/usecases/auth/*, identity/guards.py: los lanzan.

Notas:
    - Los mensajes son genéricos: jamás incluyen datos internos ni de DB.
    - InvalidCredentials se usa igual para “documento inexistente” y
      “password incorrecto”.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..crosscutting.exceptions import ServiceError


class AuthError(ServiceError):
    """Base de la taxonomía de auth (mapeable a HTTP)."""

    error_code: str = "AUTH_ERROR"
    status_code: int = 400
    default_message: str = "Error de autenticación."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def field_errors(self) -> list[dict[str, Any]]:
        """Detalle por campo para el payload (vacío por defecto)."""
        return []


class ValidationError(AuthError):
    """Input faltante o mal formado. Lista TODOS los campos inválidos."""

    error_code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Datos inválidos."

    def __init__(self, fields: Mapping[str, str], message: str | None = None) -> None:
        super().__init__(message)
        self.fields: dict[str, str] = dict(fields)

    @property
    def field_errors(self) -> list[dict[str, Any]]:
        return [{"field": name, "msg": reason} for name, reason in self.fields.items()]


class WeakPassword(AuthError):
    """El password no cumple la política. Lista TODAS las reglas incumplidas."""

    error_code = "WEAK_PASSWORD"
    status_code = 400
    default_message = "La contraseña no cumple los requisitos de seguridad."

    def __init__(self, violations: Iterable[str]) -> None:
        super().__init__()
        self.violations: list[str] = list(violations)

    @property
    def field_errors(self) -> list[dict[str, Any]]:
        return [{"field": "password", "msg": v} for v in self.violations]


class DuplicateDocument(AuthError):
    error_code = "DUPLICATE_DOCUMENT"
    status_code = 409
    default_message = "El documento ya está registrado."


class DuplicateEmail(AuthError):
    error_code = "DUPLICATE_EMAIL"
    status_code = 409
    default_message = "El email ya está registrado."


class InvalidCredentials(AuthError):
    error_code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Credenciales inválidas."


class AccountDeactivated(AuthError):
    error_code = "ACCOUNT_DEACTIVATED"
    status_code = 403
    default_message = "La cuenta está desactivada."


class Unauthorized(AuthError):
    error_code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Autenticación requerida."


class Forbidden(AuthError):
    error_code = "FORBIDDEN"
    status_code = 403
    default_message = "Acceso denegado."


class NotFound(AuthError):
    error_code = "NOT_FOUND"
    status_code = 404
    default_message = "Recurso no encontrado."


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenError(AuthError):
    error_code = "UNAUTHORIZED"
    status_code = 401


class InvalidToken(TokenError):
    default_message = "Token inválido."


class ExpiredToken(TokenError):
    default_message = "Token expirado."


# ---------------------------------------------------------------------------
# Roles (internos: los guards los convierten en Forbidden)
# ---------------------------------------------------------------------------


class RoleError(AuthError):
    error_code = "ROLE_ERROR"
    status_code = 500

    def __init__(self, role_id: int, message: str | None = None) -> None:
        super().__init__(message)
        self.role_id = role_id


class RoleNotFound(RoleError):
    default_message = "Rol inexistente."


class RoleInactive(RoleError):
    default_message = "Rol inactivo."
