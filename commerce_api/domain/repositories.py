"""
CRC - domain/repositories.py

Name
- Credential Store Interfaces (Protocols)

Responsibilities
- Define persistence contracts for accounts, profiles and roles (ports).
- Keep use cases independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- domain.entities: Account, Profile, Role and composed shapes
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- All operations are async (I/O boundary).
- "Not found" is signalled with None, never with an exception.
"""

from typing import Optional, Protocol

from .entities import (
    Account,
    AccountWithProfile,
    NewAccount,
    NewProfile,
    Profile,
    ProfileWithRole,
    Role,
)


class AccountRepository(Protocol):
    """
    R: Interface for account + profile persistence.

    Implementations must provide:
      - One-shot lookups returning composed shapes
      - Transactional account+profile creation
      - Soft (de)activation of accounts
    """

    async def get_account_with_profile_by_document(
        self, document: str
    ) -> Optional[AccountWithProfile]:
        """R: Account by document (active or not) with its profile and role."""
        ...

    async def get_profile_by_email(self, email: str) -> Optional[Profile]:
        """R: Profile by email (unique)."""
        ...

    async def get_profile_with_role_by_account_id(
        self, account_id: int
    ) -> Optional[ProfileWithRole]:
        """R: Profile + owning account + role in one round trip."""
        ...

    async def create_account_with_profile(
        self, account: NewAccount, profile: NewProfile
    ) -> tuple[Account, Profile]:
        """
        R: Atomically create the account and its linked profile.

        Both rows are committed together or neither is. A concurrent duplicate
        raises DuplicateDocument / DuplicateEmail.
        """
        ...

    async def set_account_active(
        self, account_id: int, is_active: bool
    ) -> Optional[Account]:
        """R: Soft (de)activation. None if the account does not exist."""
        ...


class RoleRepository(Protocol):
    """R: Interface for role reference data (read-only from the API)."""

    async def get_role_by_id(self, role_id: int) -> Optional[Role]:
        """R: Role by id, active or not."""
        ...

    async def list_roles(self) -> list[Role]:
        """R: Active roles ordered by id."""
        ...

    async def ping(self) -> bool:
        """R: Store health check."""
        ...
