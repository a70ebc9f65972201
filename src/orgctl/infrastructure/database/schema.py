"""SQLAlchemy Core table definitions for the orgctl database.

Two relations: ``nodes`` (identity and attributes of users and groups)
and ``closure`` (every ancestor/descendant pair with its shortest depth).
Deleting a node cascades to every closure row that mentions it.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)

metadata = MetaData()

nodes = Table(
    "nodes",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("kind", String(5), nullable=False),
    Column("name", String(255), nullable=False),
    Column("email", String(255), unique=True),  # NULL for groups
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    CheckConstraint("kind IN ('USER', 'GROUP')", name="ck_nodes_kind"),
)

closure = Table(
    "closure",
    metadata,
    Column(
        "ancestor",
        String(36),
        ForeignKey("nodes.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    ),
    Column(
        "descendant",
        String(36),
        ForeignKey("nodes.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    ),
    Column("depth", Integer, nullable=False),
    PrimaryKeyConstraint("ancestor", "descendant", name="pk_closure"),
    CheckConstraint("depth >= 0", name="ck_closure_depth"),
)

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

Index("ix_nodes_kind", nodes.c.kind)
Index("ix_nodes_email", nodes.c.email)
# Ancestor and descendant lookups run separately, each needs its own index.
Index("ix_closure_ancestor", closure.c.ancestor)
Index("ix_closure_descendant", closure.c.descendant)
