"""
===============================================================================
TARJETA CRC - application/usecases/auth/auth_results.py
===============================================================================

Módulo:
    Resultados tipados de los casos de uso de auth

Responsabilidades:
    - Definir las vistas de salida (identidad, perfil, login, estado de cuenta).
    - Mapear entidades del store -> vistas, SIN password ni hash.

Colaboradores:
    - domain.entities: Account / Profile / Role / ProfileWithRole.
    - api/*_routes.py: serializan estas vistas a JSON.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ....domain.entities import Account, Profile, ProfileWithRole, Role


@dataclass(frozen=True, slots=True)
class RoleView:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Identidad pública devuelta por registro y login."""

    id: int
    document: str
    fullname: str
    email: str
    role: RoleView | None


@dataclass(frozen=True, slots=True)
class ProfileView:
    id: int
    access_id: int
    document: str
    fullname: str
    email: str
    birth_date: date | None
    role: RoleView


@dataclass(frozen=True, slots=True)
class LoginResult:
    token: str
    expires_in: int
    user: UserIdentity


@dataclass(frozen=True, slots=True)
class AccountStatus:
    id: int
    document: str
    role_id: int
    is_active: bool


def role_view(role: Role | None) -> RoleView | None:
    if role is None:
        return None
    return RoleView(id=role.id, name=role.name)


def to_user_identity(
    account: Account, profile: Profile, role: Role | None
) -> UserIdentity:
    return UserIdentity(
        id=profile.id,
        document=account.document,
        fullname=profile.fullname,
        email=profile.email,
        role=role_view(role),
    )


def to_profile_view(found: ProfileWithRole, role: Role) -> ProfileView:
    return ProfileView(
        id=found.profile.id,
        access_id=found.account.id,
        document=found.account.document,
        fullname=found.profile.fullname,
        email=found.profile.email,
        birth_date=found.profile.birth_date,
        role=RoleView(id=role.id, name=role.name),
    )


def to_account_status(account: Account) -> AccountStatus:
    return AccountStatus(
        id=account.id,
        document=account.document,
        role_id=account.role_id,
        is_active=account.is_active,
    )
