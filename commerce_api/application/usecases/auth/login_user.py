"""
===============================================================================
USE CASE: Login User
===============================================================================

Business Goal:
    Autenticar por documento + password y emitir un access token.

Security:
    - "Documento inexistente", "cuenta sin perfil" y "password incorrecto"
      devuelven el MISMO error (InvalidCredentials).
    - Una cuenta desactivada es un estado conocido y se reporta aparte
      (AccountDeactivated), antes de verificar el password.
    - Nunca se loguea el password.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    LoginUserUseCase

Responsibilities:
    - Validar campos requeridos.
    - Buscar cuenta + perfil + rol en una sola operación.
    - Chequear estado activo y verificar password (fuera del event loop).
    - Afirmar rol activo y emitir el token.

Collaborators:
    - AccountRepository.get_account_with_profile_by_document
    - PasswordService.verify
    - RoleResolver.assert_active
    - TokenService.issue
===============================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ....crosscutting.logger import logger
from ....domain.repositories import AccountRepository
from ....identity.errors import (
    AccountDeactivated,
    Forbidden,
    InvalidCredentials,
    RoleInactive,
    ValidationError,
)
from ....identity.passwords import PasswordService
from ....identity.roles import RoleResolver
from ....identity.tokens import TokenService
from .auth_results import LoginResult, to_user_identity
from .validation import normalize_document, validate_login_fields


@dataclass(frozen=True)
class LoginUserInput:
    document: str
    password: str


class LoginUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        passwords: PasswordService,
        roles: RoleResolver,
        tokens: TokenService,
    ) -> None:
        self._accounts = accounts
        self._passwords = passwords
        self._roles = roles
        self._tokens = tokens

    async def execute(self, input_data: LoginUserInput) -> LoginResult:
        document = normalize_document(input_data.document)
        password = input_data.password or ""

        errors = validate_login_fields(document=document, password=password)
        if errors:
            raise ValidationError(errors)

        found = await self._accounts.get_account_with_profile_by_document(document)
        if found is None or found.profile is None:
            logger.warning("Login falló: credenciales inválidas", extra={"document": document})
            raise InvalidCredentials()

        account = found.account
        if not account.is_active:
            logger.warning("Login falló: cuenta desactivada", extra={"document": document})
            raise AccountDeactivated()

        matches = await asyncio.to_thread(
            self._passwords.verify, password, account.password_hash
        )
        if not matches:
            logger.warning("Login falló: credenciales inválidas", extra={"document": document})
            raise InvalidCredentials()

        try:
            role = await self._roles.assert_active(account.role_id)
        except RoleInactive as exc:
            logger.warning(
                "Login falló: rol inactivo",
                extra={"document": document, "role_id": account.role_id},
            )
            raise Forbidden("El rol de la cuenta está inactivo.") from exc

        issued = self._tokens.issue(
            account_id=account.id, document=account.document, role_id=role.id
        )
        logger.info("Login exitoso", extra={"account_id": account.id, "role": role.name})
        return LoginResult(
            token=issued.token,
            expires_in=issued.expires_in,
            user=to_user_identity(account, found.profile, role),
        )
