"""GraphEngine — lazy-built NetworkX view of the direct parent links.

Depth-1 closure rows are exactly the direct parent links, so the
parent -> child DiGraph can be recovered from the closure relation
alone. The integrity check uses it as an independent source of truth
for the depths stored in ``closure``.

Rebuilt per invocation, no cross-invocation cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import networkx as nx

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

_Graph: TypeAlias = "nx.DiGraph"


class GraphEngine:
    """Lazy-loading parent -> child graph backed by closure depth-1 rows."""

    def __init__(self, db: Engine) -> None:
        self._db = db
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building from DB on first access."""
        if self._graph is None:
            self._graph = self._build_from_db()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build_from_db(self) -> _Graph:
        """Build a DiGraph with an edge parent -> child per direct link.

        Loads all nodes first so isolated roots appear in the graph.
        """
        from sqlalchemy import select

        from orgctl.infrastructure.database.schema import closure, nodes

        g: _Graph = nx.DiGraph()
        with self._db.connect() as conn:
            for row in conn.execute(select(nodes.c.id, nodes.c.kind, nodes.c.name)):
                g.add_node(row.id, kind=row.kind, name=row.name)

            rows = conn.execute(
                select(closure.c.ancestor, closure.c.descendant).where(closure.c.depth == 1)
            )
            for row in rows:
                g.add_edge(row.ancestor, row.descendant)
        return g


def expected_depths(g: _Graph) -> dict[tuple[str, str], int]:
    """Shortest parent-link distance for every reachable pair, self pairs included."""
    expected: dict[tuple[str, str], int] = {}
    for source, lengths in nx.all_pairs_shortest_path_length(g):
        for target, depth in lengths.items():
            expected[(source, target)] = depth
    return expected


def find_cycle_nodes(g: _Graph) -> list[str]:
    """Nodes on some cycle of *g* (empty when acyclic)."""
    if nx.is_directed_acyclic_graph(g):
        return []
    try:
        cycle = nx.find_cycle(g)
    except nx.NetworkXNoCycle:
        return []
    return [edge[0] for edge in cycle]
