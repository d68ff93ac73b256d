"""
Domain layer: identity entities and credential store ports.

Nothing here imports FastAPI, psycopg or any infrastructure module.
"""

from .entities import (
    ROLE_ADMIN,
    ROLE_ANALYST,
    ROLE_SELLER,
    ROLE_USER,
    Account,
    AccountWithProfile,
    NewAccount,
    NewProfile,
    Profile,
    ProfileWithRole,
    Role,
)
from .repositories import AccountRepository, RoleRepository

__all__ = [
    "ROLE_ADMIN",
    "ROLE_ANALYST",
    "ROLE_SELLER",
    "ROLE_USER",
    "Account",
    "AccountWithProfile",
    "NewAccount",
    "NewProfile",
    "Profile",
    "ProfileWithRole",
    "Role",
    "AccountRepository",
    "RoleRepository",
]
