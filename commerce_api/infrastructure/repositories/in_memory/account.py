"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/account.py
============================================================
Class: InMemoryAccountRepository

Responsibilities:
  - Almacenar cuentas (access) y perfiles (users) en memoria.
  - Resolver las formas compuestas (cuenta + perfil + rol) como lo hace el
    JOIN de Postgres.
  - Aplicar unicidad de documento / email y la creación atómica bajo un
    mismo lock.

Collaborators:
  - InMemoryRoleRepository (para componer el rol)
  - identity.errors (DuplicateDocument, DuplicateEmail)

Constraints:
  - Thread-safe: acceso protegido por Lock.
  - Ids autoincrementales desde 1 (como SERIAL).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Optional

from ....domain.entities import (
    Account,
    AccountWithProfile,
    NewAccount,
    NewProfile,
    Profile,
    ProfileWithRole,
)
from ....identity.errors import DuplicateDocument, DuplicateEmail
from .role import InMemoryRoleRepository


class InMemoryAccountRepository:
    def __init__(self, roles: InMemoryRoleRepository) -> None:
        self._lock = Lock()
        self._roles = roles
        self._accounts: Dict[int, Account] = {}
        # R: access_id -> Profile (relación 1:1)
        self._profiles: Dict[int, Profile] = {}
        self._next_account_id = 1
        self._next_profile_id = 1

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _find_account_by_document(self, document: str) -> Optional[Account]:
        for account in self._accounts.values():
            if account.document == document:
                return account
        return None

    def _find_profile_by_email(self, email: str) -> Optional[Profile]:
        for profile in self._profiles.values():
            if profile.email == email:
                return profile
        return None

    async def get_account_with_profile_by_document(
        self, document: str
    ) -> Optional[AccountWithProfile]:
        with self._lock:
            account = self._find_account_by_document(document)
            if account is None:
                return None
            profile = self._profiles.get(account.id)
        role = await self._roles.get_role_by_id(account.role_id)
        return AccountWithProfile(account=account, profile=profile, role=role)

    async def get_profile_by_email(self, email: str) -> Optional[Profile]:
        with self._lock:
            return self._find_profile_by_email(email)

    async def get_profile_with_role_by_account_id(
        self, account_id: int
    ) -> Optional[ProfileWithRole]:
        with self._lock:
            account = self._accounts.get(account_id)
            profile = self._profiles.get(account_id)
        if account is None or profile is None:
            return None
        role = await self._roles.get_role_by_id(account.role_id)
        return ProfileWithRole(profile=profile, account=account, role=role)

    async def create_account_with_profile(
        self, account: NewAccount, profile: NewProfile
    ) -> tuple[Account, Profile]:
        with self._lock:
            if self._find_account_by_document(account.document) is not None:
                raise DuplicateDocument()
            if self._find_profile_by_email(profile.email) is not None:
                raise DuplicateEmail()

            created_account = Account(
                id=self._next_account_id,
                document=account.document,
                password_hash=account.password_hash,
                role_id=account.role_id,
                is_active=account.is_active,
                created_at=self._now(),
            )
            created_profile = Profile(
                id=self._next_profile_id,
                access_id=created_account.id,
                fullname=profile.fullname,
                email=profile.email,
                birth_date=profile.birth_date,
                is_active=profile.is_active,
            )
            self._accounts[created_account.id] = created_account
            self._profiles[created_account.id] = created_profile
            self._next_account_id += 1
            self._next_profile_id += 1
            return created_account, created_profile

    async def set_account_active(
        self, account_id: int, is_active: bool
    ) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            updated = replace(account, is_active=is_active)
            self._accounts[account_id] = updated
            return updated

    def add_account(self, account: Account, profile: Profile | None = None) -> None:
        """R: Alta directa para tests (p. ej. cuenta sin perfil)."""
        with self._lock:
            self._accounts[account.id] = account
            if profile is not None:
                self._profiles[account.id] = profile
            self._next_account_id = max(self._next_account_id, account.id + 1)
            if profile is not None:
                self._next_profile_id = max(self._next_profile_id, profile.id + 1)
