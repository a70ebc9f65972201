"""Node Store — persistence of node identity, kind, and attributes.

No closure logic lives here. Functions take a caller-owned ``Connection``
so writes join the surrounding transaction; commit or rollback is the
caller's responsibility.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError

from orgctl.domain.models import NodeRecord, generate_node_id
from orgctl.domain.types import NodeKind
from orgctl.infrastructure.database.schema import nodes

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row


class ConstraintViolation(Exception):
    """A uniqueness constraint rejected the write."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


def _to_record(row: Row[tuple[object, ...]]) -> NodeRecord:
    return NodeRecord(
        id=row.id,
        kind=NodeKind(row.kind),
        name=row.name,
        email=row.email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def create_node(
    conn: Connection,
    kind: NodeKind,
    name: str,
    email: str | None = None,
) -> NodeRecord:
    """Insert a new node and return it.

    Raises:
        ValueError: A USER without an email, or a GROUP with one.
        ConstraintViolation: *email* is already used by another node.
    """
    if kind is NodeKind.USER and not email:
        raise ValueError("USER nodes require an email")
    if kind is NodeKind.GROUP and email is not None:
        raise ValueError("GROUP nodes cannot have an email")

    now = datetime.now(UTC).isoformat()
    node_id = generate_node_id()
    # Savepoint so a constraint failure leaves the caller's transaction usable.
    try:
        with conn.begin_nested():
            conn.execute(
                insert(nodes).values(
                    id=node_id,
                    kind=str(kind),
                    name=name,
                    email=email,
                    created_at=now,
                    updated_at=now,
                )
            )
    except IntegrityError as exc:
        if email is not None and "email" in str(exc.orig).lower():
            msg = f"Email already in use: {email}"
            raise ConstraintViolation(msg, field="email") from exc
        raise

    return NodeRecord(
        id=node_id,
        kind=kind,
        name=name,
        email=email,
        created_at=now,
        updated_at=now,
    )


def find_by_id(conn: Connection, node_id: str) -> NodeRecord | None:
    row = conn.execute(select(nodes).where(nodes.c.id == node_id)).first()
    return _to_record(row) if row is not None else None


def find_by_email(conn: Connection, email: str) -> NodeRecord | None:
    row = conn.execute(select(nodes).where(nodes.c.email == email)).first()
    return _to_record(row) if row is not None else None


def delete_node(conn: Connection, node_id: str) -> bool:
    """Delete a node; its closure rows go with it via ``ON DELETE CASCADE``."""
    result = conn.execute(delete(nodes).where(nodes.c.id == node_id))
    return result.rowcount > 0


def count_by_kind(conn: Connection) -> dict[NodeKind, int]:
    """Number of nodes per kind (kinds with no nodes report 0)."""
    counts = {kind: 0 for kind in NodeKind}
    rows = conn.execute(select(nodes.c.kind, func.count()).group_by(nodes.c.kind))
    for kind, count in rows:
        counts[NodeKind(kind)] = count
    return counts


def all_node_ids(conn: Connection) -> list[str]:
    return list(conn.execute(select(nodes.c.id).order_by(nodes.c.id)).scalars())
