"""
In-Memory Repository Implementations.

For testing and APP_ENV=test. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .account import InMemoryAccountRepository
from .role import DEFAULT_ROLES, InMemoryRoleRepository

__all__ = [
    "DEFAULT_ROLES",
    "InMemoryAccountRepository",
    "InMemoryRoleRepository",
]
