"""
Role catalog endpoints (Admin / Analyst).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..application.usecases.roles import GetRoleUseCase, ListRolesUseCase
from ..container import get_list_roles_use_case, get_role_use_case
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..domain.entities import ROLE_ADMIN, ROLE_ANALYST
from ..identity.guards import require_roles

router = APIRouter(
    prefix="/roles",
    tags=["roles"],
    responses=OPENAPI_ERROR_RESPONSES,
    dependencies=[Depends(require_roles(ROLE_ADMIN, ROLE_ANALYST))],
)


class RoleResponse(BaseModel):
    id: int
    name: str


class RoleListEnvelope(BaseModel):
    success: bool = True
    message: str
    data: list[RoleResponse]


class RoleEnvelope(BaseModel):
    success: bool = True
    message: str
    data: RoleResponse


@router.get("", response_model=RoleListEnvelope)
async def list_roles(use_case: ListRolesUseCase = Depends(get_list_roles_use_case)):
    roles = await use_case.execute()
    return RoleListEnvelope(
        message="Roles obtenidos correctamente.",
        data=[RoleResponse(id=r.id, name=r.name) for r in roles],
    )


@router.get("/{role_id}", response_model=RoleEnvelope)
async def get_role(
    role_id: int,
    use_case: GetRoleUseCase = Depends(get_role_use_case),
):
    role = await use_case.execute(role_id)
    return RoleEnvelope(
        message="Rol obtenido correctamente.",
        data=RoleResponse(id=role.id, name=role.name),
    )


__all__ = ["router"]
