# =============================================================================
# FILE: application/dev_seed_admin.py
# =============================================================================
"""
===============================================================================
TASK: Dev Seed Admin (Local-only)
===============================================================================

Qué es:
    Asegura que exista una cuenta Admin para desarrollo cuando está configurado
    (DEV_SEED_ADMIN=true).

Seguridad:
    - Guard estricto: solo corre con app_env == "local".
    - La cuenta se crea por el mismo caso de uso de registro (validación,
      política de password y hash incluidos).

Patrones:
    - Fail-fast guard (safety boundary)
    - Idempotencia (skip si el documento ya existe)

CRC:
    Component: ensure_dev_admin
    Responsibilities:
      - Validar guard de ambiente
      - Crear la cuenta admin si falta
    Collaborators:
      - AccountRepository (lookup por documento)
      - RegisterUserUseCase (alta con rol explícito)
      - Settings (dev_seed_admin*)
===============================================================================
"""

from __future__ import annotations

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.repositories import AccountRepository
from .usecases.auth import RegisterUserInput, RegisterUserUseCase


def _assert_allowed_environment(settings: Settings) -> None:
    env = (settings.app_env or "").strip().lower()
    if env != "local":
        raise RuntimeError(
            f"FATAL: DEV_SEED_ADMIN is enabled but ENV is '{env}' (must be 'local'). "
            "Safety guard prevents accidental admin creation."
        )


async def ensure_dev_admin(
    settings: Settings,
    *,
    accounts: AccountRepository,
    register: RegisterUserUseCase,
) -> bool:
    """
    Ensure a development admin account exists if configured.

    Returns True when an account was created.
    """
    if not settings.dev_seed_admin:
        return False

    _assert_allowed_environment(settings)

    document = (settings.dev_seed_admin_document or "").strip()
    existing = await accounts.get_account_with_profile_by_document(document)
    if existing is not None:
        logger.info("Dev seed admin: account already exists; skipping", extra={"document": document})
        return False

    created = await register.execute(
        RegisterUserInput(
            document=document,
            password=settings.dev_seed_admin_password,
            fullname=settings.dev_seed_admin_fullname,
            email=settings.dev_seed_admin_email,
            role_id=settings.dev_seed_admin_role_id,
        )
    )
    logger.warning(
        "Dev seed admin: account created",
        extra={"document": created.document, "user_id": created.id},
    )
    return True
