"""In-memory closure algebra.

The database performs link propagation as one set-based upsert. This
module expresses the same step explicitly so the relation can be
recomputed from direct parent links (integrity rebuild) and so the SQL
can be cross-checked in tests:

- fetch the ancestors of the parent with their depths,
- fetch the descendants of the child with their depths,
- merge the cross product of depth sums into the map, keeping the
  minimum per ``(ancestor, descendant)`` key.

This is one relaxation step of incremental all-pairs shortest paths.
Applying it once per direct link, in any order, starting from the
self-links yields the exact shortest-path closure of an acyclic graph.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeAlias

ClosureMap: TypeAlias = "dict[tuple[str, str], int]"


class CycleError(ValueError):
    """Linking would make a node its own ancestor."""

    def __init__(self, child_id: str, parent_id: str) -> None:
        super().__init__(f"linking {child_id!r} under {parent_id!r} would create a cycle")
        self.child_id = child_id
        self.parent_id = parent_id


def self_links(node_ids: Iterable[str]) -> ClosureMap:
    """Reflexive ``(n, n) -> 0`` entries for every node."""
    return {(n, n): 0 for n in node_ids}


def ancestors_of(closure: ClosureMap, node_id: str) -> dict[str, int]:
    """``{ancestor: depth}`` including the node itself at depth 0."""
    return {a: depth for (a, d), depth in closure.items() if d == node_id}


def descendants_of(closure: ClosureMap, node_id: str) -> dict[str, int]:
    """``{descendant: depth}`` including the node itself at depth 0."""
    return {d: depth for (a, d), depth in closure.items() if a == node_id}


def relax_link(closure: ClosureMap, child_id: str, parent_id: str) -> int:
    """Link *child_id* under *parent_id* in place.

    Returns the number of pairs in the cross product. Raises
    :class:`CycleError` if *parent_id* is already reachable from
    *child_id*; the map is untouched in that case.
    """
    if child_id == parent_id or (child_id, parent_id) in closure:
        raise CycleError(child_id, parent_id)

    ups = ancestors_of(closure, parent_id)
    downs = descendants_of(closure, child_id)
    for a, a_depth in ups.items():
        for d, d_depth in downs.items():
            depth = a_depth + 1 + d_depth
            current = closure.get((a, d))
            if current is None or depth < current:
                closure[(a, d)] = depth
    return len(ups) * len(downs)


def build_closure(node_ids: Iterable[str], links: Iterable[tuple[str, str]]) -> ClosureMap:
    """Full closure from node ids and ``(child, parent)`` direct links."""
    closure = self_links(node_ids)
    for child_id, parent_id in links:
        relax_link(closure, child_id, parent_id)
    return closure
