"""CheckService — closure integrity and reconstruction.

The closure relation is only correct if it was correct before every
link. Direct edits to the database can break that, and nothing in the
link path would notice. ``check`` compares the stored relation against
shortest paths recomputed with NetworkX from the depth-1 rows (the
direct parent links); ``rebuild`` replaces it with the closure
recomputed from those same links.

Issue categories:

- self_links: a node without ``(n, n, 0)``, or a self row with depth != 0
- acyclicity: the direct-link graph contains a cycle
- missing_pairs: a reachable pair with no row
- spurious_pairs: a row for an unreachable pair
- depth: a row whose depth is not the shortest chain length
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from orgctl.domain.closure import CycleError, build_closure
from orgctl.domain.types import ErrorCode
from orgctl.infrastructure.database.closure import direct_links, load_edges, replace_all
from orgctl.infrastructure.database.nodes import all_node_ids
from orgctl.infrastructure.graph.engine import expected_depths, find_cycle_nodes
from orgctl.services.base import BaseService
from orgctl.services.result import ServiceResult
from orgctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

SEVERITY_ERROR = "error"

CAT_SELF_LINKS = "self_links"
CAT_ACYCLIC = "acyclicity"
CAT_MISSING = "missing_pairs"
CAT_SPURIOUS = "spurious_pairs"
CAT_DEPTH = "depth"


def _issue(
    category: str,
    message: str,
    *,
    severity: str = SEVERITY_ERROR,
    **extra: Any,
) -> dict[str, Any]:
    return {"category": category, "severity": severity, "message": message, **extra}


class CheckService(BaseService):
    """Verifies and repairs the closure relation."""

    @traced
    def check(self) -> ServiceResult:
        """Report integrity issues without modifying anything."""
        with trace_span("load"), self._registry.engine.connect() as conn:
            node_ids = all_node_ids(conn)
            stored = load_edges(conn)
        g = self._registry.graph.graph

        issues: list[dict[str, Any]] = []

        with trace_span("self_links"):
            for node_id in node_ids:
                depth = stored.get((node_id, node_id))
                if depth is None:
                    issues.append(
                        _issue(CAT_SELF_LINKS, f"Missing self-link for {node_id}", node_id=node_id)
                    )
                elif depth != 0:
                    issues.append(
                        _issue(
                            CAT_SELF_LINKS,
                            f"Self-link for {node_id} has depth {depth}",
                            node_id=node_id,
                        )
                    )

        with trace_span("acyclicity"):
            cycle = find_cycle_nodes(g)
            if cycle:
                issues.append(
                    _issue(CAT_ACYCLIC, f"Cycle through {' -> '.join(cycle)}", nodes=cycle)
                )

        with trace_span("pairs"):
            expected = expected_depths(g)
            for (a, d), depth in sorted(expected.items()):
                if a == d:
                    continue
                actual = stored.get((a, d))
                if actual is None:
                    issues.append(
                        _issue(
                            CAT_MISSING,
                            f"Missing closure row {a} -> {d} (depth {depth})",
                            ancestor=a,
                            descendant=d,
                            expected=depth,
                        )
                    )
                elif actual != depth:
                    issues.append(
                        _issue(
                            CAT_DEPTH,
                            f"Closure row {a} -> {d} has depth {actual}, shortest is {depth}",
                            ancestor=a,
                            descendant=d,
                            expected=depth,
                            actual=actual,
                        )
                    )
            for (a, d), depth in sorted(stored.items()):
                if a != d and (a, d) not in expected:
                    issues.append(
                        _issue(
                            CAT_SPURIOUS,
                            f"Closure row {a} -> {d} (depth {depth}) has no parent-link path",
                            ancestor=a,
                            descendant=d,
                            actual=depth,
                        )
                    )

        logger.info("Integrity check found %d issue(s)", len(issues))
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "nodes": len(node_ids),
                "edges": len(stored),
                "count": len(issues),
                "issues": issues,
            },
        )

    @traced
    def rebuild(self) -> ServiceResult:
        """Recompute the closure from the depth-1 rows and replace it."""
        op = "rebuild"
        try:
            with self._registry.transaction() as txn:
                with trace_span("recompute") as span:
                    node_ids = all_node_ids(txn.conn)
                    links = direct_links(txn.conn)
                    try:
                        rebuilt = build_closure(node_ids, links)
                    except CycleError as exc:
                        return self._failure(
                            op,
                            ErrorCode.CYCLE_DETECTED,
                            f"Direct links are cyclic, cannot rebuild: {exc}",
                            child_id=exc.child_id,
                            parent_id=exc.parent_id,
                        )
                    if span:
                        span.annotate("links", len(links))

                before = load_edges(txn.conn)
                with trace_span("replace"):
                    written = replace_all(txn.conn, rebuilt)
        except SQLAlchemyError as exc:
            logger.error("Closure rebuild failed: %s", exc)
            return self._failure(op, ErrorCode.TRANSACTION_FAILED, f"Rebuild failed: {exc}")

        changed = sum(1 for key, depth in rebuilt.items() if before.get(key) != depth)
        removed = sum(1 for key in before if key not in rebuilt)
        logger.info("Closure rebuilt rows=%d changed=%d removed=%d", written, changed, removed)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "nodes": len(node_ids),
                "links": len(links),
                "rows": written,
                "changed": changed,
                "removed": removed,
            },
        )
