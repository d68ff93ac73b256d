"""
===============================================================================
TARJETA CRC - commerce_api/api/admin_routes.py (Administración de cuentas)
===============================================================================

Responsabilidades:
  - Soft (de)activación de cuentas por un Admin.

Colaboradores:
  - identity.guards.require_roles(Admin)
  - application.usecases.auth.SetAccountActiveUseCase
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..application.usecases.auth import (
    AccountStatus,
    SetAccountActiveInput,
    SetAccountActiveUseCase,
)
from ..container import get_set_account_active_use_case
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..domain.entities import ROLE_ADMIN
from ..identity.guards import require_auth, require_roles
from ..identity.tokens import TokenClaims

router = APIRouter(
    prefix="/admin/accounts",
    tags=["admin"],
    responses=OPENAPI_ERROR_RESPONSES,
    dependencies=[Depends(require_roles(ROLE_ADMIN))],
)


class AccountStatusResponse(BaseModel):
    id: int
    document: str
    role_id: int
    is_active: bool


class AccountStatusEnvelope(BaseModel):
    success: bool = True
    message: str
    data: AccountStatusResponse


def _to_envelope(status: AccountStatus, message: str) -> AccountStatusEnvelope:
    return AccountStatusEnvelope(
        message=message,
        data=AccountStatusResponse(
            id=status.id,
            document=status.document,
            role_id=status.role_id,
            is_active=status.is_active,
        ),
    )


@router.post("/{account_id}/deactivate", response_model=AccountStatusEnvelope)
async def deactivate_account(
    account_id: int,
    claims: TokenClaims = Depends(require_auth()),
    use_case: SetAccountActiveUseCase = Depends(get_set_account_active_use_case),
):
    """Desactiva una cuenta (no puede volver a hacer login)."""
    status = await use_case.execute(
        SetAccountActiveInput(
            account_id=account_id,
            is_active=False,
            actor_account_id=claims.account_id,
        )
    )
    return _to_envelope(status, "Cuenta desactivada.")


@router.post("/{account_id}/activate", response_model=AccountStatusEnvelope)
async def activate_account(
    account_id: int,
    claims: TokenClaims = Depends(require_auth()),
    use_case: SetAccountActiveUseCase = Depends(get_set_account_active_use_case),
):
    """Reactiva una cuenta."""
    status = await use_case.execute(
        SetAccountActiveInput(
            account_id=account_id,
            is_active=True,
            actor_account_id=claims.account_id,
        )
    )
    return _to_envelope(status, "Cuenta activada.")


__all__ = ["router"]
