from .roles import GetRoleUseCase, ListRolesUseCase

__all__ = ["GetRoleUseCase", "ListRolesUseCase"]
