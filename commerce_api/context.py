"""
===============================================================================
TARJETA CRC - commerce_api/context.py (Contexto de logs por request)
===============================================================================

Responsabilidades:
  - Guardar request_id / method / path (y la cuenta autenticada) en un
    ContextVar, aislado por request / task.
  - Exponer el contexto al formatter de logs.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware (set / clear)
  - identity.guards (bind_context: account_id)
  - crosscutting.logger.JSONFormatter (get_context_dict)
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from types import MappingProxyType
from typing import Mapping

_EMPTY: Mapping[str, str] = MappingProxyType({})

_request_context: ContextVar[Mapping[str, str]] = ContextVar(
    "request_context", default=_EMPTY
)


def set_request_context(*, request_id: str, method: str, path: str) -> None:
    _request_context.set(
        MappingProxyType({"request_id": request_id, "method": method, "path": path})
    )


def bind_context(**values: object) -> None:
    """Agrega claves al contexto actual (valores vacíos se ignoran)."""
    merged = dict(_request_context.get())
    merged.update({k: str(v) for k, v in values.items() if v not in (None, "")})
    _request_context.set(MappingProxyType(merged))


def get_context_dict() -> dict[str, str]:
    return {k: v for k, v in _request_context.get().items() if v}


def clear_context() -> None:
    _request_context.set(_EMPTY)
