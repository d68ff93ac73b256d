"""
===============================================================================
TARJETA CRC - crosscutting/middleware.py (Middlewares HTTP)
===============================================================================

Componentes:
  - RequestContextMiddleware: X-Request-Id + contexto de logs + log de acceso.
  - BodyLimitMiddleware: corta bodies mayores a MAX_BODY_BYTES con 413.

Colaboradores:
  - commerce_api/context.py
  - crosscutting/error_responses.py (problem+json)
  - crosscutting/config.py (max_body_bytes)

Notas:
  - Un X-Request-Id entrante se reutiliza sólo si es corto y imprimible.
  - El body se mide por Content-Length y, para bodies chunked, por los bytes
    efectivamente recibidos (se bufferea hasta max_bytes).
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from collections import deque
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, ErrorDetail
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
_REQUEST_ID_MAX_LEN = 128
_SILENT_PATHS = frozenset({"/healthz"})


def _accepted_request_id(raw: str | None) -> str | None:
    value = (raw or "").strip()
    if not value or len(value) > _REQUEST_ID_MAX_LEN or not value.isprintable():
        return None
    return value


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Asigna request_id, puebla el contexto de logs y registra el acceso."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or str(
            uuid.uuid4()
        )
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            if request.url.path not in _SILENT_PATHS:
                logger.info(
                    "acceso HTTP",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                    },
                )
            clear_context()


def _payload_too_large(max_bytes: int, path: str) -> JSONResponse:
    problem = ErrorDetail(
        type="about:blank/payload_too_large",
        title="Payload Too Large",
        status=413,
        detail=f"El body supera el máximo permitido ({max_bytes} bytes).",
        code=ErrorCode.PAYLOAD_TOO_LARGE,
        instance=path,
    )
    return JSONResponse(
        status_code=413,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


class BodyLimitMiddleware:
    """ASGI puro: rechaza requests cuyo body excede `max_bytes`."""

    def __init__(self, app, max_bytes: int | None = None) -> None:
        if max_bytes is None:
            from .config import get_settings

            max_bytes = get_settings().max_body_bytes
        self.app = app
        self.max_bytes = max_bytes

    def _declared_length(self, scope) -> int | None:
        for name, value in scope.get("headers", []):
            if name.lower() == b"content-length":
                raw = value.decode("latin-1").strip()
                return int(raw) if raw.isdigit() else None
        return None

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        declared = self._declared_length(scope)
        if declared is not None and declared > self.max_bytes:
            logger.warning(
                "body rechazado por Content-Length",
                extra={"content_length": declared, "max_bytes": self.max_bytes},
            )
            await _payload_too_large(self.max_bytes, path)(scope, receive, send)
            return

        # R: el body se bufferea acá (hasta max_bytes) y se re-entrega a la app.
        buffered: deque = deque()
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body") or b"")
            if received > self.max_bytes:
                logger.warning(
                    "body rechazado durante la lectura",
                    extra={"received_bytes": received, "max_bytes": self.max_bytes},
                )
                await _payload_too_large(self.max_bytes, path)(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay_receive():
            if buffered:
                return buffered.popleft()
            return await receive()

        await self.app(scope, replay_receive, send)
