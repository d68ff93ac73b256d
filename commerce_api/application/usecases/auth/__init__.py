"""
Auth use cases: registration, login, profile and account (de)activation.
"""

from .auth_results import (
    AccountStatus,
    LoginResult,
    ProfileView,
    RoleView,
    UserIdentity,
)
from .get_profile import GetProfileUseCase
from .login_user import LoginUserInput, LoginUserUseCase
from .password_policy import PasswordPolicy
from .register_user import RegisterUserInput, RegisterUserUseCase
from .set_account_active import SetAccountActiveInput, SetAccountActiveUseCase

__all__ = [
    "AccountStatus",
    "LoginResult",
    "ProfileView",
    "RoleView",
    "UserIdentity",
    "GetProfileUseCase",
    "LoginUserInput",
    "LoginUserUseCase",
    "PasswordPolicy",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "SetAccountActiveInput",
    "SetAccountActiveUseCase",
]
