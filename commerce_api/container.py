"""
===============================================================================
TARJETA CRC - commerce_api/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, servicios de identidad, casos de uso).
  - Exponer factories para FastAPI (Depends) y para el lifespan.
  - Mantener singletons con caching (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories (puertos)
  - infrastructure.repositories (implementaciones)
  - identity.* (passwords, tokens, roles)
  - application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - El RoleCache es el único estado compartido mutable del proceso.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache
from typing import cast

from .application.usecases import (
    GetProfileUseCase,
    GetRoleUseCase,
    ListRolesUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    SetAccountActiveUseCase,
)
from .application.usecases.auth import PasswordPolicy
from .crosscutting.config import get_settings
from .domain.repositories import AccountRepository, RoleRepository
from .identity.passwords import PasswordService
from .identity.roles import RoleCache, RoleResolver
from .identity.tokens import TokenService
from .infrastructure.repositories import (
    InMemoryAccountRepository,
    InMemoryRoleRepository,
    PostgresAccountRepository,
    PostgresRoleRepository,
)

# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_role_repository() -> RoleRepository:
    """Repositorio de roles (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        return InMemoryRoleRepository()
    return PostgresRoleRepository()


@lru_cache(maxsize=1)
def get_account_repository() -> AccountRepository:
    """Store de credenciales (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        # R: el store in-memory compone el rol desde el repo de roles in-memory.
        roles = cast(InMemoryRoleRepository, get_role_repository())
        return InMemoryAccountRepository(roles)
    return PostgresAccountRepository()


# =============================================================================
# Identidad
# =============================================================================


@lru_cache(maxsize=1)
def get_role_cache() -> RoleCache:
    return RoleCache()


@lru_cache(maxsize=1)
def get_role_resolver() -> RoleResolver:
    return RoleResolver(get_role_repository(), get_role_cache())


@lru_cache(maxsize=1)
def get_password_service() -> PasswordService:
    settings = get_settings()
    return PasswordService(
        time_cost=settings.password_time_cost,
        memory_cost=settings.password_memory_cost,
        parallelism=settings.password_parallelism,
    )


@lru_cache(maxsize=1)
def get_password_policy() -> PasswordPolicy:
    return PasswordPolicy(min_length=get_settings().password_min_length)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        ttl_seconds=settings.jwt_access_ttl_minutes * 60,
    )


# =============================================================================
# Casos de uso
# =============================================================================


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(
        accounts=get_account_repository(),
        passwords=get_password_service(),
        policy=get_password_policy(),
        roles=get_role_resolver(),
        default_role_id=get_settings().default_role_id,
    )


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase(
        accounts=get_account_repository(),
        passwords=get_password_service(),
        roles=get_role_resolver(),
        tokens=get_token_service(),
    )


def get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase(
        accounts=get_account_repository(),
        roles=get_role_resolver(),
    )


def get_set_account_active_use_case() -> SetAccountActiveUseCase:
    return SetAccountActiveUseCase(accounts=get_account_repository())


def get_list_roles_use_case() -> ListRolesUseCase:
    return ListRolesUseCase(repository=get_role_repository())


def get_role_use_case() -> GetRoleUseCase:
    return GetRoleUseCase(resolver=get_role_resolver())


# =============================================================================
# Tests
# =============================================================================


def clear_container_cache() -> None:
    """Descarta los singletons (tests que cambian Settings entre casos)."""
    for factory in (
        get_role_repository,
        get_account_repository,
        get_role_cache,
        get_role_resolver,
        get_password_service,
        get_password_policy,
        get_token_service,
    ):
        factory.cache_clear()
