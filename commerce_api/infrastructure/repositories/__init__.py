"""
============================================================
TARJETA CRC - infrastructure/repositories/__init__.py
============================================================
Module: infrastructure.repositories (Public Export Surface)

Responsibilities:
  - Exponer las implementaciones concretas del store de credenciales
    (Postgres e InMemory) en un único punto de importación.

Policy:
  - Solo re-exporta símbolos; no debe tener side effects.
============================================================
"""

# ------------------------------------------------------------
# In-memory implementations (tests / APP_ENV=test)
# ------------------------------------------------------------
from .in_memory import InMemoryAccountRepository, InMemoryRoleRepository

# ------------------------------------------------------------
# Postgres implementations (producción)
# ------------------------------------------------------------
from .postgres import PostgresAccountRepository, PostgresRoleRepository

__all__ = [
    # Postgres
    "PostgresAccountRepository",
    "PostgresRoleRepository",
    # In-memory
    "InMemoryAccountRepository",
    "InMemoryRoleRepository",
]
