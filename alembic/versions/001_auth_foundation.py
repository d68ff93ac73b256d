"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_auth_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema de identidad: roles, access (credenciales), users (perfil).
  - Sembrar los roles de referencia (ids estables).

Collaborators:
  - PostgreSQL 14+
  - infrastructure/repositories/postgres/* (usa este esquema como contrato)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - Convención de nombres:
      pk_<tabla> / uq_<tabla>_<col> / ix_<tabla>_<col> / fk_<tabla>_<col>__<ref_tabla>
  - uq_access_document y uq_users_email son leídos por el repositorio para
    mapear violaciones concurrentes a DuplicateDocument / DuplicateEmail.
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_auth_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_SEED_ROLES = (
    (1, "Admin"),
    (2, "User"),
    (3, "Seller"),
    (4, "Analyst"),
)


def upgrade() -> None:
    # =========================================================
    # 1) ROLES
    # =========================================================
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_roles"),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.bulk_insert(roles, [{"id": i, "name": n, "is_active": True} for i, n in _SEED_ROLES])
    # Ids explícitos: la identidad sigue después del último sembrado.
    op.execute(
        "SELECT setval(pg_get_serial_sequence('roles', 'id'), (SELECT MAX(id) FROM roles))"
    )

    # =========================================================
    # 2) ACCESS (credenciales)
    # =========================================================
    op.create_table(
        "access",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("document", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("role_id", sa.Integer, nullable=False, server_default=sa.text("2")),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_access"),
        sa.UniqueConstraint("document", name="uq_access_document"),
        sa.ForeignKeyConstraint(
            ["role_id"], ["roles.id"], name="fk_access_role_id__roles"
        ),
    )
    op.create_index("ix_access_role_id", "access", ["role_id"])

    # =========================================================
    # 3) USERS (perfil 1:1 con access)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("access_id", sa.Integer, nullable=False),
        sa.Column("fullname", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("access_id", name="uq_users_access_id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.ForeignKeyConstraint(
            ["access_id"],
            ["access.id"],
            name="fk_users_access_id__access",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    """
    Downgrade NO soportado para la migración fundacional.

    Para resetear el entorno local: recrear la base y correr `alembic upgrade head`.
    """
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y correr `alembic upgrade head`."
    )
