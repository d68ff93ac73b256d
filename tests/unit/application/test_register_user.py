"""
Name: Register User Use Case Tests

Responsibilities:
  - Happy path: default role, normalized fields, no password in result
  - Step order: validation -> duplicate document -> duplicate email -> policy
  - Role resolution: explicit (internal) vs default (configuration)
"""

from dataclasses import asdict

import pytest

from commerce_api.identity.errors import (
    DuplicateDocument,
    DuplicateEmail,
    RoleInactive,
    RoleNotFound,
    ValidationError,
    WeakPassword,
)
from conftest import STRONG_PASSWORD, register_input

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_register_creates_account_with_default_role(register_use_case, account_repo, password_service):
    user = await register_use_case.execute(register_input(email="  A@B.com "))

    assert user.document == "D1"
    assert user.fullname == "A B"
    assert user.email == "a@b.com"
    assert user.role.id == 2
    assert user.role.name == "User"

    stored = await account_repo.get_account_with_profile_by_document("D1")
    assert stored.account.password_hash != STRONG_PASSWORD
    assert password_service.verify(STRONG_PASSWORD, stored.account.password_hash)
    assert stored.profile.id == user.id


@pytest.mark.asyncio
async def test_register_result_never_contains_password(register_use_case):
    user = await register_use_case.execute(register_input())
    serialized = str(asdict(user))

    assert STRONG_PASSWORD not in serialized
    assert "argon2" not in serialized
    assert "password" not in asdict(user)


@pytest.mark.asyncio
async def test_register_reports_every_invalid_field(register_use_case):
    with pytest.raises(ValidationError) as exc_info:
        await register_use_case.execute(
            register_input(document=" ", password="", fullname="", email="bad")
        )

    assert set(exc_info.value.fields) == {"document", "password", "fullname", "email"}


@pytest.mark.asyncio
async def test_duplicate_document_is_rejected(register_use_case):
    await register_use_case.execute(register_input())

    with pytest.raises(DuplicateDocument):
        await register_use_case.execute(register_input(email="other@b.com"))


@pytest.mark.asyncio
async def test_duplicate_document_checked_before_email(register_use_case):
    await register_use_case.execute(register_input())

    with pytest.raises(DuplicateDocument):
        await register_use_case.execute(register_input())


@pytest.mark.asyncio
async def test_duplicate_email_is_case_insensitive(register_use_case):
    await register_use_case.execute(register_input())

    with pytest.raises(DuplicateEmail):
        await register_use_case.execute(register_input(document="D2", email="A@B.COM"))


@pytest.mark.asyncio
async def test_duplicates_checked_before_password_policy(register_use_case):
    await register_use_case.execute(register_input())

    with pytest.raises(DuplicateDocument):
        await register_use_case.execute(register_input(password="weak"))


@pytest.mark.asyncio
async def test_weak_password_lists_all_violations(register_use_case, account_repo):
    with pytest.raises(WeakPassword) as exc_info:
        await register_use_case.execute(register_input(password="weakpass"))

    # R: uppercase, digit, special
    assert len(exc_info.value.violations) == 3
    assert await account_repo.get_account_with_profile_by_document("D1") is None


@pytest.mark.asyncio
async def test_explicit_role_is_used(register_use_case):
    user = await register_use_case.execute(register_input(role_id=3))

    assert user.role.name == "Seller"


@pytest.mark.asyncio
async def test_explicit_unknown_role_is_validation_error(register_use_case):
    with pytest.raises(ValidationError) as exc_info:
        await register_use_case.execute(register_input(role_id=99))

    assert "role_id" in exc_info.value.fields


@pytest.mark.asyncio
async def test_misconfigured_default_role_propagates(register_use_case, role_repo):
    register_use_case._default_role_id = 99
    with pytest.raises(RoleNotFound):
        await register_use_case.execute(register_input())

    register_use_case._default_role_id = 2
    role_repo.set_role_active(2, False)
    with pytest.raises(RoleInactive):
        await register_use_case.execute(register_input())


@pytest.mark.asyncio
async def test_is_active_defaults_true_and_respects_false(register_use_case, account_repo):
    await register_use_case.execute(register_input())
    await register_use_case.execute(
        register_input(document="D2", email="c@d.com", is_active=False)
    )

    first = await account_repo.get_account_with_profile_by_document("D1")
    second = await account_repo.get_account_with_profile_by_document("D2")
    assert first.account.is_active is True
    assert second.account.is_active is False
