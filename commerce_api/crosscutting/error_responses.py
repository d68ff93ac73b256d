"""
===============================================================================
TARJETA CRC - crosscutting/error_responses.py (Contrato de error HTTP)
===============================================================================

Responsabilidades:
  - Catálogo estable de códigos (ErrorCode) que consume el frontend.
  - Payload RFC 7807 (ErrorDetail) con `success: false` y request_id.
  - AppHTTPException + handler que lo serializa como problem+json.
  - Documentar las respuestas de error en OpenAPI.

Colaboradores:
  - api/exception_handlers.py (traduce excepciones de dominio)
  - crosscutting/middleware.py (request_id, 413)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    DUPLICATE_DOCUMENT = "DUPLICATE_DOCUMENT"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    ROLE_ERROR = "ROLE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


class ErrorDetail(BaseModel):
    """Problem Details (RFC 7807) + campos propios de la API.

    `errors` lleva el detalle por campo (`{"field", "msg"}`) o el `error_id`
    de un fallo interno para correlacionar con los logs.
    """

    success: bool = False
    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    request_id: str | None = None
    errors: list[dict[str, Any]] | None = None


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y errores por campo opcionales."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


def problem_response(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    problem = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.label,
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=request.url.path,
        request_id=getattr(request.state, "request_id", None),
        errors=exc.errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(request, exc)


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": f"{description} (problem+json)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for status, description in (
        (400, "Datos inválidos"),
        (401, "No autenticado"),
        (403, "Sin permisos"),
        (404, "No encontrado"),
        (409, "Conflicto"),
        ("default", "Error"),
    )
}
