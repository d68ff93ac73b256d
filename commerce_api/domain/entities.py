"""
===============================================================================
TARJETA CRC - domain/entities.py
===============================================================================

Módulo:
    Entidades de identidad (Account / Profile / Role)

Responsabilidades:
    - Definir los registros planos del store de credenciales.
    - Definir las formas compuestas que devuelve el store en un solo round trip
      (AccountWithProfile, ProfileWithRole).
    - Definir los inputs de creación (NewAccount / NewProfile).

Colaboradores:
    - domain/repositories.py: contratos que devuelven estas entidades.
    - infrastructure/repositories/*: mapean filas -> entidades.
    - application/usecases/auth/*: orquestan registro / login / perfil.

Notas:
    - Sin lógica de negocio: solo shapes inmutables.
    - password_hash vive solo en Account; ningún mapping de respuesta lo expone.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Final

# Nombres de roles sembrados (la autorización compara por nombre, no por id).
ROLE_ADMIN: Final[str] = "Admin"
ROLE_USER: Final[str] = "User"
ROLE_SELLER: Final[str] = "Seller"
ROLE_ANALYST: Final[str] = "Analyst"


@dataclass(frozen=True, slots=True)
class Role:
    """Bucket de permisos referenciado por cuentas."""

    id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Account:
    """Registro de credenciales (tabla access)."""

    id: int
    document: str
    password_hash: str
    role_id: int
    is_active: bool = True
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Profile:
    """Registro de usuario (tabla users), 1:1 con Account."""

    id: int
    access_id: int
    fullname: str
    email: str
    birth_date: date | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class AccountWithProfile:
    """Cuenta + perfil + rol obtenidos en una sola operación (login)."""

    account: Account
    profile: Profile | None
    role: Role | None = None


@dataclass(frozen=True, slots=True)
class ProfileWithRole:
    """Perfil + cuenta dueña + rol (endpoint de perfil)."""

    profile: Profile
    account: Account
    role: Role | None = None


@dataclass(frozen=True, slots=True)
class NewAccount:
    document: str
    password_hash: str
    role_id: int
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class NewProfile:
    fullname: str
    email: str
    birth_date: date | None = None
    is_active: bool = True
