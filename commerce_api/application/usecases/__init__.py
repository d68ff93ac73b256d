"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── auth/    # Registration, login, profile, account (de)activation
└── roles/   # Role catalog (read-only)

Usage
-----
    from commerce_api.application.usecases.auth import LoginUserUseCase
    from commerce_api.application.usecases import RegisterUserUseCase
"""

# Auth
from .auth import (
    GetProfileUseCase,
    LoginUserInput,
    LoginUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    SetAccountActiveInput,
    SetAccountActiveUseCase,
)

# Roles
from .roles import GetRoleUseCase, ListRolesUseCase

__all__ = [
    "GetProfileUseCase",
    "LoginUserInput",
    "LoginUserUseCase",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "SetAccountActiveInput",
    "SetAccountActiveUseCase",
    "GetRoleUseCase",
    "ListRolesUseCase",
]
