"""
===============================================================================
TARJETA CRC - crosscutting/logger.py (Logging JSON de la API)
===============================================================================

Responsabilidades:
  - Emitir una línea JSON por evento (timestamp, nivel, mensaje, origen).
  - Adjuntar request_id / method / path desde context.py.
  - Copiar los `extra=` del llamador ocultando credenciales
    (passwords, hashes, tokens, secretos, header Authorization).

Colaboradores:
  - commerce_api/context.py
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)

Notas:
  - Los documentos de identidad SÍ se loguean (auditoría de login); nunca
    el password ni el token emitido.
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

REDACTED = "***REDACTADO***"

# R: atributos propios de LogRecord; todo lo demás vino por `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}

# R: match por substring sobre el nombre de la clave (case-insensitive).
_SENSITIVE_FRAGMENTS = ("password", "passwd", "token", "secret", "authorization", "hash")

_MAX_VALUE_CHARS = 2_000
_MAX_NESTING = 3


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS)


def scrub(key: str, value: Any, depth: int = 0) -> Any:
    """Valor seguro para JSON con credenciales ocultas."""
    if _is_sensitive(key):
        return REDACTED
    if depth >= _MAX_NESTING:
        return "…"
    if isinstance(value, str):
        return value if len(value) <= _MAX_VALUE_CHARS else value[:_MAX_VALUE_CHARS] + "…"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, dict):
        return {str(k): scrub(str(k), v, depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [scrub(key, v, depth + 1) for v in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON (una línea) con contexto de request y extras saneados."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "origin": f"{record.module}.{record.funcName}:{record.lineno}",
            "pid": os.getpid(),
            **get_context_dict(),
        }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                entry[key] = scrub(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def _resolve_logging_settings() -> tuple[int, bool]:
    from pydantic import ValidationError

    from .config import get_settings

    try:
        settings = get_settings()
    except ValidationError:
        # R: tooling (alembic, linters) importa sin DATABASE_URL.
        return logging.INFO, True
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    return (level if isinstance(level, int) else logging.INFO), settings.log_json


def configure_logging(name: str = "commerce-api") -> logging.Logger:
    """Logger de la API; idempotente ante reimports."""
    level, as_json = _resolve_logging_settings()

    log = logging.getLogger(name)
    log.setLevel(level)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter() if as_json else logging.Formatter("%(levelname)s %(message)s")
        )
        log.addHandler(handler)
    return log


logger = configure_logging()
