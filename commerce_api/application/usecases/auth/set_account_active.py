"""
===============================================================================
USE CASE: Set Account Active (soft deactivation / reactivation)
===============================================================================

Business Goal:
    Permitir a un administrador desactivar o reactivar una cuenta sin
    borrarla. Una cuenta desactivada no puede volver a hacer login.

Notas:
    - Los tokens ya emitidos siguen siendo válidos hasta su expiración
      (los guards no consultan el store por request).
    - Un admin no puede desactivar su propia cuenta.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.logger import logger
from ....domain.repositories import AccountRepository
from ....identity.errors import Forbidden, NotFound
from .auth_results import AccountStatus, to_account_status


@dataclass(frozen=True)
class SetAccountActiveInput:
    account_id: int
    is_active: bool
    actor_account_id: int | None = None


class SetAccountActiveUseCase:
    def __init__(self, *, accounts: AccountRepository) -> None:
        self._accounts = accounts

    async def execute(self, input_data: SetAccountActiveInput) -> AccountStatus:
        if (
            not input_data.is_active
            and input_data.actor_account_id is not None
            and input_data.actor_account_id == input_data.account_id
        ):
            raise Forbidden("No puede desactivar su propia cuenta.")

        account = await self._accounts.set_account_active(
            input_data.account_id, input_data.is_active
        )
        if account is None:
            raise NotFound("Cuenta no encontrada.")

        logger.info(
            "Estado de cuenta actualizado",
            extra={"account_id": account.id, "is_active": account.is_active},
        )
        return to_account_status(account)
