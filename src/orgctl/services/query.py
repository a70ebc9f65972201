"""HierarchyQueryService — read-only lookups over the closure relation.

Each query checks the node exists, then reads from the Closure Store.
Reads use deferred transactions and never take the write lock.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

from orgctl.domain.types import ErrorCode, NodeKind
from orgctl.infrastructure.database.closure import (
    count_edges,
    get_ancestors,
    get_descendants,
    get_organizations,
)
from orgctl.infrastructure.database.nodes import count_by_kind, find_by_id
from orgctl.services.base import BaseService
from orgctl.services.result import ServiceResult
from orgctl.services.telemetry import traced

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from orgctl.domain.models import HierarchyEntry

logger = logging.getLogger(__name__)

_Reader: TypeAlias = "Callable[[Connection, str], list[HierarchyEntry]]"


class HierarchyQueryService(BaseService):
    """Ancestor, descendant, and organization listings."""

    @traced
    def get_node(self, node_id: str) -> ServiceResult:
        """Fetch a single node."""
        with self._registry.engine.connect() as conn:
            node = find_by_id(conn, node_id)
        if node is None:
            return self._failure("get_node", ErrorCode.NOT_FOUND, "Node not found", id=node_id)
        return ServiceResult(ok=True, op="get_node", data=node.model_dump(mode="json"))

    @traced
    def get_node_ancestors(self, node_id: str) -> ServiceResult:
        """Every strict ancestor of *node_id*, nearest first."""
        return self._listing("get_node_ancestors", node_id, get_ancestors)

    @traced
    def get_node_descendants(self, node_id: str) -> ServiceResult:
        """Every strict descendant of *node_id*, nearest first."""
        return self._listing("get_node_descendants", node_id, get_descendants)

    @traced
    def get_user_organizations(self, user_id: str) -> ServiceResult:
        """Every GROUP above *user_id*, each once at its shortest depth."""
        return self._listing("get_user_organizations", user_id, get_organizations, label="User")

    @traced
    def stats(self) -> ServiceResult:
        """Node totals per kind and the number of non-reflexive closure rows."""
        with self._registry.engine.connect() as conn:
            counts = count_by_kind(conn)
            edges = count_edges(conn)
        return ServiceResult(
            ok=True,
            op="stats",
            data={
                "users": counts[NodeKind.USER],
                "groups": counts[NodeKind.GROUP],
                "closure_edges": edges,
            },
        )

    def _listing(
        self,
        op: str,
        node_id: str,
        reader: _Reader,
        *,
        label: str = "Node",
    ) -> ServiceResult:
        logger.info("%s node_id=%s", op, node_id)
        with self._registry.engine.connect() as conn:
            if find_by_id(conn, node_id) is None:
                logger.info("%s not found id=%s", label, node_id)
                return self._failure(op, ErrorCode.NOT_FOUND, f"{label} not found", id=node_id)
            entries = reader(conn, node_id)

        logger.info("%s returned count=%d", op, len(entries))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": node_id,
                "count": len(entries),
                "items": [e.model_dump() for e in entries],
            },
        )
