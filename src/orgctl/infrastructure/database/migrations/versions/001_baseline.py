"""Baseline schema — nodes and closure relations.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Databases created by ``orgctl init`` are stamped at this revision
without running it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "nodes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("kind", sa.String(5), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text, nullable=False),
        sa.CheckConstraint("kind IN ('USER', 'GROUP')", name="ck_nodes_kind"),
    )
    op.create_index("ix_nodes_kind", "nodes", ["kind"])
    op.create_index("ix_nodes_email", "nodes", ["email"])

    op.create_table(
        "closure",
        sa.Column(
            "ancestor",
            sa.String(36),
            sa.ForeignKey("nodes.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "descendant",
            sa.String(36),
            sa.ForeignKey("nodes.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("depth", sa.Integer, nullable=False),
        sa.PrimaryKeyConstraint("ancestor", "descendant", name="pk_closure"),
        sa.CheckConstraint("depth >= 0", name="ck_closure_depth"),
    )
    op.create_index("ix_closure_ancestor", "closure", ["ancestor"])
    op.create_index("ix_closure_descendant", "closure", ["descendant"])


def downgrade() -> None:
    op.drop_index("ix_closure_descendant", table_name="closure")
    op.drop_index("ix_closure_ancestor", table_name="closure")
    op.drop_table("closure")
    op.drop_index("ix_nodes_email", table_name="nodes")
    op.drop_index("ix_nodes_kind", table_name="nodes")
    op.drop_table("nodes")
