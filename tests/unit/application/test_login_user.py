"""
Name: Login Use Case Tests

Responsibilities:
  - Token issued with account id / document / role id
  - Unknown document and wrong password are indistinguishable
  - Deactivated account is reported before password verification
"""

from unittest.mock import patch

import pytest

from commerce_api.application.usecases.auth import LoginUserInput
from commerce_api.domain.entities import Account, Profile
from commerce_api.identity.errors import (
    AccountDeactivated,
    Forbidden,
    InvalidCredentials,
    RoleNotFound,
    ValidationError,
)
from conftest import STRONG_PASSWORD, register_input

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_login_returns_token_and_identity(register_use_case, login_use_case, token_service):
    registered = await register_use_case.execute(register_input())

    result = await login_use_case.execute(LoginUserInput(document=" D1 ", password=STRONG_PASSWORD))

    claims = token_service.verify(result.token)
    assert claims.document == "D1"
    assert claims.role_id == 2
    assert result.expires_in == 3600
    assert result.user == registered


@pytest.mark.asyncio
async def test_unknown_document_and_wrong_password_look_the_same(register_use_case, login_use_case):
    await register_use_case.execute(register_input())

    with pytest.raises(InvalidCredentials) as unknown:
        await login_use_case.execute(LoginUserInput(document="nope", password=STRONG_PASSWORD))
    with pytest.raises(InvalidCredentials) as wrong:
        await login_use_case.execute(LoginUserInput(document="D1", password="Wr0ng!Pass"))

    assert type(unknown.value) is type(wrong.value)
    assert unknown.value.message == wrong.value.message


@pytest.mark.asyncio
async def test_missing_fields_are_validation_error(login_use_case):
    with pytest.raises(ValidationError) as exc_info:
        await login_use_case.execute(LoginUserInput(document="", password=""))

    assert set(exc_info.value.fields) == {"document", "password"}


@pytest.mark.asyncio
async def test_deactivated_account_is_reported_without_verifying_password(
    register_use_case, login_use_case, account_repo, password_service
):
    await register_use_case.execute(register_input())
    stored = await account_repo.get_account_with_profile_by_document("D1")
    await account_repo.set_account_active(stored.account.id, False)

    with patch.object(password_service, "verify") as verify:
        with pytest.raises(AccountDeactivated):
            await login_use_case.execute(LoginUserInput(document="D1", password="anything"))

    verify.assert_not_called()


@pytest.mark.asyncio
async def test_account_without_profile_is_invalid_credentials(
    login_use_case, account_repo, password_service
):
    account_repo.add_account(
        Account(
            id=50,
            document="ORPHAN",
            password_hash=password_service.hash(STRONG_PASSWORD),
            role_id=2,
        )
    )

    with pytest.raises(InvalidCredentials):
        await login_use_case.execute(LoginUserInput(document="ORPHAN", password=STRONG_PASSWORD))


@pytest.mark.asyncio
async def test_inactive_role_blocks_login(register_use_case, login_use_case, role_repo, role_cache):
    await register_use_case.execute(register_input(role_id=3))
    role_repo.set_role_active(3, False)
    role_cache.invalidate(3)

    with pytest.raises(Forbidden):
        await login_use_case.execute(LoginUserInput(document="D1", password=STRONG_PASSWORD))


@pytest.mark.asyncio
async def test_dangling_role_is_internal_error(login_use_case, account_repo, password_service):
    account_repo.add_account(
        Account(
            id=60,
            document="D60",
            password_hash=password_service.hash(STRONG_PASSWORD),
            role_id=404,
        ),
        profile=Profile(id=60, access_id=60, fullname="X", email="x@y.com"),
    )

    with pytest.raises(RoleNotFound):
        await login_use_case.execute(LoginUserInput(document="D60", password=STRONG_PASSWORD))
