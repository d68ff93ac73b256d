"""
===============================================================================
USE CASE: Register User
===============================================================================

Business Goal:
    Dar de alta una cuenta (credenciales) y su perfil en una sola operación,
    garantizando:
      - campos completos y email sintácticamente válido
      - documento y email únicos
      - password fuerte (política configurable)
      - rol existente y activo

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RegisterUserUseCase

Responsibilities:
    - Normalizar y validar TODOS los campos (mapa campo -> motivo).
    - Verificar unicidad de documento y luego de email.
    - Aplicar la política de password (todas las reglas incumplidas).
    - Hashear el password fuera del event loop.
    - Afirmar el rol (default de settings o explícito de un caller interno).
    - Persistir cuenta + perfil de forma atómica.
    - Devolver la identidad creada (sin password ni hash).

Collaborators:
    - AccountRepository: lookups + create_account_with_profile
    - PasswordService / PasswordPolicy
    - RoleResolver: assert_active

-------------------------------------------------------------------------------
Error Mapping:
    - ValidationError:    campos faltantes / email inválido / role_id explícito inválido
    - DuplicateDocument:  documento ya registrado
    - DuplicateEmail:     email ya registrado
    - WeakPassword:       política incumplida
    - RoleError:          rol default mal configurado (error interno)
===============================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date

from ....crosscutting.logger import logger
from ....domain.entities import NewAccount, NewProfile
from ....domain.repositories import AccountRepository
from ....identity.errors import (
    DuplicateDocument,
    DuplicateEmail,
    RoleError,
    ValidationError,
    WeakPassword,
)
from ....identity.passwords import PasswordService
from ....identity.roles import RoleResolver
from .auth_results import UserIdentity, to_user_identity
from .password_policy import PasswordPolicy
from .validation import (
    normalize_document,
    normalize_email,
    normalize_fullname,
    validate_registration_fields,
)


@dataclass(frozen=True)
class RegisterUserInput:
    """
    DTO de entrada.

    Notas:
      - role_id: solo para callers internos (seed); el endpoint público no lo expone.
      - is_active: None => True; un False explícito se respeta.
    """

    document: str
    password: str
    fullname: str
    email: str
    birth_date: date | None = None
    role_id: int | None = None
    is_active: bool | None = None


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        passwords: PasswordService,
        policy: PasswordPolicy,
        roles: RoleResolver,
        default_role_id: int,
    ) -> None:
        self._accounts = accounts
        self._passwords = passwords
        self._policy = policy
        self._roles = roles
        self._default_role_id = default_role_id

    async def execute(self, input_data: RegisterUserInput) -> UserIdentity:
        # ---------------------------------------------------------------------
        # 1) Normalizar + validar todos los campos.
        # ---------------------------------------------------------------------
        document = normalize_document(input_data.document)
        email = normalize_email(input_data.email)
        fullname = normalize_fullname(input_data.fullname)
        password = input_data.password or ""

        errors = validate_registration_fields(
            document=document, password=password, fullname=fullname, email=email
        )
        if errors:
            raise ValidationError(errors)

        # ---------------------------------------------------------------------
        # 2) Unicidad (documento primero, luego email).
        # ---------------------------------------------------------------------
        if await self._accounts.get_account_with_profile_by_document(document):
            logger.info("Registro rechazado: documento duplicado", extra={"document": document})
            raise DuplicateDocument()

        if await self._accounts.get_profile_by_email(email):
            logger.info("Registro rechazado: email duplicado", extra={"document": document})
            raise DuplicateEmail()

        # ---------------------------------------------------------------------
        # 3) Política de password.
        # ---------------------------------------------------------------------
        violations = self._policy.violations(password)
        if violations:
            raise WeakPassword(violations)

        # ---------------------------------------------------------------------
        # 4) Hash (CPU-bound, fuera del loop).
        # ---------------------------------------------------------------------
        password_hash = await asyncio.to_thread(self._passwords.hash, password)

        # ---------------------------------------------------------------------
        # 5) Rol efectivo.
        # ---------------------------------------------------------------------
        role = await self._resolve_role(input_data.role_id)

        # ---------------------------------------------------------------------
        # 6) Persistencia atómica.
        # ---------------------------------------------------------------------
        is_active = True if input_data.is_active is None else input_data.is_active
        account, profile = await self._accounts.create_account_with_profile(
            NewAccount(
                document=document,
                password_hash=password_hash,
                role_id=role.id,
                is_active=is_active,
            ),
            NewProfile(
                fullname=fullname,
                email=email,
                birth_date=input_data.birth_date,
                is_active=is_active,
            ),
        )

        logger.info(
            "Cuenta registrada",
            extra={"account_id": account.id, "document": document, "role": role.name},
        )
        return to_user_identity(account, profile, role)

    async def _resolve_role(self, role_id: int | None):
        if role_id is None:
            # R: rol default mal configurado => error interno (propaga RoleError).
            return await self._roles.assert_active(self._default_role_id)

        try:
            return await self._roles.assert_active(role_id)
        except RoleError as exc:
            raise ValidationError({"role_id": "Rol inexistente o inactivo."}) from exc
