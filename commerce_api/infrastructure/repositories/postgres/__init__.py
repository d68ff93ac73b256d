"""
PostgreSQL Repository Implementations.

Production implementations using psycopg 3 async connections.
"""

from .account import PostgresAccountRepository
from .role import PostgresRoleRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresRoleRepository",
]
