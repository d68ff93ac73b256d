"""
===============================================================================
TARJETA CRC - identity/passwords.py
===============================================================================

Módulo:
    Hasher de passwords (Argon2id)

Responsabilidades:
    - Hashear passwords con salt aleatorio y costo configurable.
    - Verificar password vs hash en tiempo constante.
    - Traducir fallas de la librería a HashingError.

Colaboradores:
    - argon2-cffi (PasswordHasher).
    - crosscutting.config: time_cost / memory_cost / parallelism.
    - application/usecases/auth: registro y login.

Decisiones de diseño:
    - La criptografía vive en el borde de identidad, NO en dominio.
    - Mismatch => False (nunca excepción). Hash corrupto => HashingError.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from ..crosscutting.exceptions import HashingError
from ..crosscutting.logger import logger


class PasswordService:
    """Hash + verificación de passwords (Argon2id)."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, plaintext: str) -> str:
        """Hashea un password usando Argon2id."""
        try:
            return self._hasher.hash(plaintext)
        except Argon2HashingError as exc:
            logger.error("Hashing de password falló", extra={"error": str(exc)})
            raise HashingError("No se pudo hashear el password.", original_error=exc) from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Verifica password vs hash almacenado."""
        try:
            return self._hasher.verify(hashed, plaintext)
        except VerifyMismatchError:
            return False
        except InvalidHashError as exc:
            logger.error("Hash de password almacenado inválido")
            raise HashingError("Hash de password inválido.", original_error=exc) from exc
        except VerificationError:
            return False
