"""
===============================================================================
TARJETA CRC - identity/tokens.py
===============================================================================

Módulo:
    Servicio de tokens de acceso (JWT HS256)

Responsabilidades:
    - Emitir JWT firmados con expiración (access token).
    - Verificar firma, estructura, tipos de claims y expiración.
    - Extraer el token desde `Authorization: Bearer <token>`.

Colaboradores:
    - PyJWT (encode/decode).
    - crosscutting.config: jwt_secret / jwt_access_ttl_minutes.
    - identity/guards.py: verifica tokens por request.
    - application/usecases/auth/login_user.py: emite tokens.

Decisiones de diseño:
    - La expiración se evalúa con un reloj inyectable (tests sin sleep).
    - Cualquier token manipulado o basura termina en InvalidToken: nunca se
      propaga otra excepción ante input de un atacante.
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt

from .errors import ExpiredToken, InvalidToken

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_DOCUMENT: str = "document"
CLAIM_ROLE_ID: str = "role_id"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"

_REQUIRED_CLAIMS = [CLAIM_SUB, CLAIM_DOCUMENT, CLAIM_ROLE_ID, CLAIM_IAT, CLAIM_EXP]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Claims verificados de un access token (no se persisten)."""

    account_id: int
    document: str
    role_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int


def _as_int(value: Any) -> int:
    """Entero estricto (bool no cuenta como int)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("claim no entero")
    return value


class TokenService:
    """Emite y verifica access tokens HS256."""

    def __init__(
        self,
        *,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("secret requerido")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds debe ser > 0")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, *, account_id: int, document: str, role_id: int) -> IssuedToken:
        """Crea un JWT de acceso firmado."""
        now = self._clock()
        issued_at = int(now.timestamp())
        expires_at = int((now + timedelta(seconds=self._ttl_seconds)).timestamp())

        payload: dict[str, object] = {
            CLAIM_SUB: str(account_id),
            CLAIM_DOCUMENT: document,
            CLAIM_ROLE_ID: role_id,
            CLAIM_IAT: issued_at,
            CLAIM_EXP: expires_at,
            CLAIM_TYP: TOKEN_TYPE_ACCESS,
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_in=expires_at - issued_at)

    def verify(self, token: str) -> TokenClaims:
        """Decodifica y valida un JWT de acceso.

        Errores:
            - ExpiredToken si now >= exp.
            - InvalidToken ante cualquier otra falla (firma, formato, claims).
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                # R: exp/iat se validan abajo contra el reloj inyectado.
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            if payload.get(CLAIM_TYP) != TOKEN_TYPE_ACCESS:
                raise InvalidToken("Tipo de token inválido.")

            sub = payload[CLAIM_SUB]
            if not isinstance(sub, str) or not sub.isdigit():
                raise InvalidToken()
            document = payload[CLAIM_DOCUMENT]
            if not isinstance(document, str) or not document:
                raise InvalidToken()

            account_id = int(sub)
            role_id = _as_int(payload[CLAIM_ROLE_ID])
            issued_at = datetime.fromtimestamp(_as_int(payload[CLAIM_IAT]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(_as_int(payload[CLAIM_EXP]), tz=timezone.utc)
        except InvalidToken:
            raise
        except (jwt.InvalidTokenError, ValueError, TypeError, OverflowError, OSError) as exc:
            raise InvalidToken() from exc

        if self._clock() >= expires_at:
            raise ExpiredToken()

        return TokenClaims(
            account_id=account_id,
            document=document,
            role_id=role_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    @staticmethod
    def extract_from_header(value: str | None) -> str | None:
        """Extrae token desde `Authorization: Bearer <token>`."""
        if not value:
            return None
        parts = value.strip().split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        token = parts[1].strip()
        return token or None
