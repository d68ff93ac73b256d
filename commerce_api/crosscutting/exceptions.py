"""
===============================================================================
TARJETA CRC - crosscutting/exceptions.py (Errores internos tipados)
===============================================================================

Responsabilidades:
  - Raíz común (ServiceError) de todo error que la API sabe traducir a HTTP.
  - Cada instancia lleva un error_id único para cruzar respuesta y logs.
  - Conservar la causa original (driver, hasher) sin exponerla al cliente.

Colaboradores:
  - api/exception_handlers.py
  - identity/errors.py (AuthError deriva de ServiceError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class ServiceError(Exception):
    """Error interno con código estable y error_id de correlación."""

    error_code: str = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.error_id = error_id or uuid4().hex


class PersistenceError(ServiceError):
    """Fallo del store (conexión, query, timeout o pool)."""

    error_code: str = "DATABASE_ERROR"


class HashingError(ServiceError):
    """Fallo del hasher de contraseñas o hash almacenado corrupto."""

    error_code: str = "HASHING_ERROR"
