"""
===============================================================================
TARJETA CRC - api/exception_handlers.py (Excepciones -> problem+json)
===============================================================================

Responsabilidades:
  - AuthError esperables: status / code / mensaje propios del error.
  - Errores internos (rol, DB, hashing, no tipados): detalle genérico +
    error_id, con el mensaje real sólo en los logs.
  - Body / params inválidos de FastAPI: 400 VALIDATION_ERROR por campo.
  - HTTPException de Starlette (ruta inexistente, método no permitido):
    mismo formato problem+json con un ErrorCode según el status.

Colaboradores:
  - crosscutting.error_responses (AppHTTPException, ErrorCode, problem_response)
  - crosscutting.exceptions (ServiceError, PersistenceError)
  - identity.errors (AuthError, RoleError)

Notas:
  - Starlette elige el handler por MRO de la excepción: AuthError y
    PersistenceError ganan sobre ServiceError.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
)
from ..crosscutting.exceptions import PersistenceError, ServiceError
from ..crosscutting.logger import logger
from ..identity.errors import AuthError, RoleError

MSG_INTERNAL = "Error interno."
MSG_DATABASE = "Servicio de datos no disponible."
MSG_REQUEST_INVALID = "Datos inválidos."

_PARAM_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})

_HTTP_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
}


def _respond(
    request: Request,
    status_code: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    return problem_response(
        request, AppHTTPException(status_code, code, detail, errors or None)
    )


def _internal(
    request: Request, exc: ServiceError, *, status_code: int, code: ErrorCode, detail: str
) -> JSONResponse:
    logger.error(
        "Error interno tipado",
        extra={
            "code": code.value,
            "error_type": type(exc).__name__,
            "error_id": exc.error_id,
            "error_message": exc.message,
        },
    )
    return _respond(request, status_code, code, detail, [{"error_id": exc.error_id}])


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    if isinstance(exc, RoleError):
        # R: un rol roto fuera de los guards es un problema de datos/config.
        return _internal(
            request, exc, status_code=500, code=ErrorCode.ROLE_ERROR, detail=MSG_INTERNAL
        )
    return _respond(
        request, exc.status_code, ErrorCode(exc.error_code), exc.message, exc.field_errors
    )


async def persistence_error_handler(
    request: Request, exc: PersistenceError
) -> JSONResponse:
    return _internal(
        request, exc, status_code=503, code=ErrorCode.DATABASE_ERROR, detail=MSG_DATABASE
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return _internal(
        request, exc, status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=MSG_INTERNAL
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException de Starlette / FastAPI (404 de ruta, 405, etc.) -> problem+json."""
    if isinstance(exc, AppHTTPException):
        return problem_response(request, exc)
    if exc.status_code >= 500:
        code = ErrorCode.INTERNAL_ERROR
    else:
        code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.VALIDATION_ERROR)
    problem = AppHTTPException(exc.status_code, code, str(exc.detail))
    # R: conserva headers propios (Allow en 405, WWW-Authenticate en 401).
    problem.headers = exc.headers
    return problem_response(request, problem)


def _field_name(loc: tuple[Any, ...]) -> str:
    # R: ("body", "email") -> "email"; ("body",) -> "body"
    parts = [str(p) for p in loc if p not in _PARAM_SOURCES]
    if parts:
        return ".".join(parts)
    return str(loc[0]) if loc else "body"


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """JSON mal formado / tipos inválidos -> 400 (no 422)."""
    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _respond(request, 400, ErrorCode.VALIDATION_ERROR, MSG_REQUEST_INVALID, errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Cualquier excepción no tipada: stacktrace al log, detalle genérico al cliente."""
    logger.error(
        "Excepción no controlada",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"error_type": type(exc).__name__},
    )
    return _respond(request, 500, ErrorCode.INTERNAL_ERROR, MSG_INTERNAL)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
