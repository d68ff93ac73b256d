"""
===============================================================================
TARJETA CRC - commerce_api/api/auth_routes.py (Autenticación)
===============================================================================

Responsabilidades:
  - Exponer registro, login y perfil (JWT Bearer).
  - Traducir HTTP <-> casos de uso (DTOs pydantic de entrada / salida).

Patrones aplicados:
  - Adapter / Presentation Layer.
  - Fail-safe security: los guards deniegan por defecto.

Colaboradores:
  - application.usecases.auth: Register / Login / GetProfile
  - identity.guards.require_auth
  - container: factories de casos de uso
===============================================================================
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..application.usecases.auth import (
    GetProfileUseCase,
    LoginUserInput,
    LoginUserUseCase,
    ProfileView,
    RegisterUserInput,
    RegisterUserUseCase,
    RoleView,
    UserIdentity,
)
from ..container import (
    get_login_user_use_case,
    get_profile_use_case,
    get_register_user_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.guards import require_auth
from ..identity.tokens import TokenClaims

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)

MSG_REGISTERED = "Usuario registrado correctamente."
MSG_LOGGED_IN = "Login exitoso."
MSG_PROFILE = "Perfil obtenido correctamente."


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    # R: defaults vacíos => el caso de uso reporta TODOS los campos faltantes.
    #    Un campo `role` enviado por el cliente se ignora (extra="ignore").
    document: str = Field(default="", max_length=64)
    password: str = Field(default="", max_length=512)
    fullname: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=320)
    birth_date: date | None = None


class LoginRequest(BaseModel):
    document: str = Field(default="", max_length=64)
    password: str = Field(default="", max_length=512)


class RoleResponse(BaseModel):
    id: int
    name: str


class UserResponse(BaseModel):
    id: int
    document: str
    fullname: str
    email: str
    role: RoleResponse | None


class RegisterResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    expires_in: int
    message: str
    user: UserResponse


class ProfileResponse(BaseModel):
    id: int
    access_id: int
    document: str
    fullname: str
    email: str
    birth_date: date | None
    role: RoleResponse


class ProfileEnvelope(BaseModel):
    success: bool = True
    message: str
    data: ProfileResponse


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_role_response(role: RoleView | None) -> RoleResponse | None:
    if role is None:
        return None
    return RoleResponse(id=role.id, name=role.name)


def _to_user_response(user: UserIdentity) -> UserResponse:
    return UserResponse(
        id=user.id,
        document=user.document,
        fullname=user.fullname,
        email=user.email,
        role=_to_role_response(user.role),
    )


def _to_profile_response(profile: ProfileView) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        access_id=profile.access_id,
        document=profile.document,
        fullname=profile.fullname,
        email=profile.email,
        birth_date=profile.birth_date,
        role=RoleResponse(id=profile.role.id, name=profile.role.name),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    """Alta self-service: siempre con el rol default."""
    user = await use_case.execute(
        RegisterUserInput(
            document=req.document,
            password=req.password,
            fullname=req.fullname,
            email=req.email,
            birth_date=req.birth_date,
        )
    )
    return RegisterResponse(message=MSG_REGISTERED, user=_to_user_response(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    """Inicia sesión y devuelve un JWT de acceso."""
    result = await use_case.execute(
        LoginUserInput(document=req.document, password=req.password)
    )
    return LoginResponse(
        token=result.token,
        expires_in=result.expires_in,
        message=MSG_LOGGED_IN,
        user=_to_user_response(result.user),
    )


@router.get("/profile", response_model=ProfileEnvelope)
async def profile(
    claims: TokenClaims = Depends(require_auth()),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
):
    """Devuelve el perfil del titular del token."""
    view = await use_case.execute(claims)
    return ProfileEnvelope(message=MSG_PROFILE, data=_to_profile_response(view))


__all__ = ["router"]
