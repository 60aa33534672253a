"""Initial schema - users and tareas

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # Tareas
    op.create_table(
        "tareas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("usuario_id", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(255), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=False),
        sa.Column("fecha_asignacion", sa.Date(), nullable=False),
        sa.Column("hora_asignacion", sa.Time(), nullable=False),
        sa.Column("fecha_entrega", sa.Date(), nullable=True),
        sa.Column("hora_entrega", sa.Time(), nullable=True),
        sa.Column("finalizada", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("prioridad", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("pending_sync", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_tareas"),
        sa.ForeignKeyConstraint(["usuario_id"], ["users.id"], name="fk_tareas_usuario_id_users", ondelete="CASCADE"),
    )
    op.create_index("ix_tareas_usuario_id", "tareas", ["usuario_id"])
    op.create_index("ix_tareas_deleted", "tareas", ["deleted"])


def downgrade() -> None:
    op.drop_table("tareas")
    op.drop_table("users")
