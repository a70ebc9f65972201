"""Closure Store — the transitive-closure relation.

Every ``(ancestor, descendant)`` pair reachable through parent links has
exactly one row whose ``depth`` is the shortest chain length, and every
node has its ``(id, id, 0)`` self-link. Only this module writes
``closure`` rows.

Link propagation is a single ``INSERT ... SELECT ... ON CONFLICT``:

    INSERT INTO closure (ancestor, descendant, depth)
    SELECT a.ancestor, d.descendant, a.depth + 1 + d.depth
    FROM closure AS a JOIN closure AS d ON 1
    WHERE a.descendant = :parent AND d.ancestor = :child
    ON CONFLICT (ancestor, descendant)
    DO UPDATE SET depth = min(closure.depth, excluded.depth)

The minimum is evaluated by SQLite against the stored value, so
concurrent writers can never lose a shorter depth to a longer one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, literal, select, true
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from orgctl.domain.models import HierarchyEntry
from orgctl.domain.types import NodeKind
from orgctl.infrastructure.database.schema import closure, nodes

if TYPE_CHECKING:
    from sqlalchemy import Connection, Select

    from orgctl.domain.closure import ClosureMap


def insert_self_link(conn: Connection, node_id: str) -> None:
    """Insert ``(node_id, node_id, 0)``. Call in the node-creation transaction."""
    conn.execute(insert(closure).values(ancestor=node_id, descendant=node_id, depth=0))


def link(conn: Connection, child_id: str, parent_id: str) -> int:
    """Connect every ancestor of *parent_id* to every descendant of *child_id*.

    Depth of each pair is ``depth(a, parent) + 1 + depth(child, d)``;
    existing pairs keep ``min(existing, new)``. The caller must have
    checked for cycles inside the same transaction.

    Returns the number of pairs in the cross product.
    """
    a = closure.alias("a")
    d = closure.alias("d")

    pairs = (
        select(
            a.c.ancestor,
            d.c.descendant,
            (a.c.depth + literal(1) + d.c.depth).label("depth"),
        )
        .select_from(a.join(d, true()))
        .where(a.c.descendant == parent_id, d.c.ancestor == child_id)
    )

    stmt = sqlite_insert(closure).from_select(["ancestor", "descendant", "depth"], pairs)
    stmt = stmt.on_conflict_do_update(
        index_elements=[closure.c.ancestor, closure.c.descendant],
        set_={"depth": func.min(closure.c.depth, stmt.excluded.depth)},
    )
    conn.execute(stmt)

    ups = conn.execute(
        select(func.count()).select_from(closure).where(closure.c.descendant == parent_id)
    ).scalar_one()
    downs = conn.execute(
        select(func.count()).select_from(closure).where(closure.c.ancestor == child_id)
    ).scalar_one()
    return int(ups) * int(downs)


def has_path(conn: Connection, ancestor_id: str, descendant_id: str) -> bool:
    """Whether a closure row ``(ancestor_id, descendant_id)`` exists."""
    row = conn.execute(
        select(closure.c.depth).where(
            closure.c.ancestor == ancestor_id,
            closure.c.descendant == descendant_id,
        )
    ).first()
    return row is not None


def get_depth(conn: Connection, ancestor_id: str, descendant_id: str) -> int | None:
    return conn.execute(
        select(closure.c.depth).where(
            closure.c.ancestor == ancestor_id,
            closure.c.descendant == descendant_id,
        )
    ).scalar_one_or_none()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def _entries(conn: Connection, stmt: Select[tuple[str, str, int]]) -> list[HierarchyEntry]:
    return [HierarchyEntry(id=r.id, name=r.name, depth=r.depth) for r in conn.execute(stmt)]


def get_ancestors(conn: Connection, node_id: str) -> list[HierarchyEntry]:
    """Strict ancestors of *node_id*, nearest first."""
    stmt = (
        select(nodes.c.id, nodes.c.name, closure.c.depth)
        .select_from(closure.join(nodes, nodes.c.id == closure.c.ancestor))
        .where(closure.c.descendant == node_id, closure.c.depth >= 1)
        .order_by(closure.c.depth, nodes.c.name, nodes.c.id)
    )
    return _entries(conn, stmt)


def get_descendants(conn: Connection, node_id: str) -> list[HierarchyEntry]:
    """Strict descendants of *node_id*, nearest first."""
    stmt = (
        select(nodes.c.id, nodes.c.name, closure.c.depth)
        .select_from(closure.join(nodes, nodes.c.id == closure.c.descendant))
        .where(closure.c.ancestor == node_id, closure.c.depth >= 1)
        .order_by(closure.c.depth, nodes.c.name, nodes.c.id)
    )
    return _entries(conn, stmt)


def get_organizations(conn: Connection, user_id: str) -> list[HierarchyEntry]:
    """GROUP ancestors of *user_id*, one row per group at its minimum depth."""
    min_depth = func.min(closure.c.depth).label("depth")
    stmt = (
        select(nodes.c.id, nodes.c.name, min_depth)
        .select_from(closure.join(nodes, nodes.c.id == closure.c.ancestor))
        .where(
            closure.c.descendant == user_id,
            closure.c.depth >= 1,
            nodes.c.kind == str(NodeKind.GROUP),
        )
        .group_by(nodes.c.id, nodes.c.name)
        .order_by(min_depth, nodes.c.name, nodes.c.id)
    )
    return _entries(conn, stmt)


# ---------------------------------------------------------------------------
# Bulk access (integrity check and rebuild)
# ---------------------------------------------------------------------------


def load_edges(conn: Connection) -> ClosureMap:
    """The whole relation as ``{(ancestor, descendant): depth}``."""
    rows = conn.execute(select(closure.c.ancestor, closure.c.descendant, closure.c.depth))
    return {(r.ancestor, r.descendant): r.depth for r in rows}


def direct_links(conn: Connection) -> list[tuple[str, str]]:
    """``(child, parent)`` pairs recorded at depth 1."""
    rows = conn.execute(
        select(closure.c.descendant, closure.c.ancestor)
        .where(closure.c.depth == 1)
        .order_by(closure.c.ancestor, closure.c.descendant)
    )
    return [(r.descendant, r.ancestor) for r in rows]


def count_edges(conn: Connection, *, include_self: bool = False) -> int:
    stmt = select(func.count()).select_from(closure)
    if not include_self:
        stmt = stmt.where(closure.c.depth >= 1)
    return int(conn.execute(stmt).scalar_one())


def replace_all(conn: Connection, edges: ClosureMap) -> int:
    """Replace the relation with *edges*. Returns the row count written."""
    conn.execute(delete(closure))
    if edges:
        conn.execute(
            insert(closure),
            [{"ancestor": a, "descendant": d, "depth": depth} for (a, d), depth in edges.items()],
        )
    return len(edges)
