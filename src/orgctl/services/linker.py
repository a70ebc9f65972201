"""HierarchyLinker — node creation and parent-link propagation.

Pipelines:

- create_user: VALIDATE → PERSIST (node + self-link) → RESPOND
- create_group: VALIDATE → CHECK PARENT → PERSIST (node + self-link)
  → GUARD + LINK (one locked transaction) → RESPOND
- associate_user_to_group: VALIDATE → CHECK KINDS → RE-CHECK KINDS + GUARD
  + LINK (one locked transaction) → RESPOND

The cycle guard always runs inside the same ``BEGIN IMMEDIATE``
transaction as the closure upsert, so two concurrent links can never
each pass the guard and jointly close a loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from orgctl.domain.models import (
    AssociateInput,
    CreateGroupInput,
    CreateUserInput,
    NodeRecord,
    format_validation_errors,
)
from orgctl.domain.types import ErrorCode, NodeKind
from orgctl.infrastructure.database.closure import get_depth, insert_self_link, link
from orgctl.infrastructure.database.cycles import would_create_cycle
from orgctl.infrastructure.database.nodes import (
    ConstraintViolation,
    create_node,
    delete_node,
    find_by_email,
    find_by_id,
)
from orgctl.services.base import BaseService
from orgctl.services.result import ServiceResult
from orgctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from sqlalchemy import Connection

logger = logging.getLogger(__name__)


class HierarchyLinker(BaseService):
    """Creates users and groups and links them into the hierarchy."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def create_user(self, name: str, email: str) -> ServiceResult:
        """Create a USER node with its self-link."""
        op = "create_user"
        logger.info("Creating user name=%s email=%s", name, email)

        with trace_span("validate"):
            try:
                data = CreateUserInput.model_validate(
                    {"name": name, "email": email}, context=self._validation_context()
                )
            except ValidationError as exc:
                return self._failure(
                    op, ErrorCode.VALIDATION_FAILED, format_validation_errors(exc)
                )

            with self._registry.engine.connect() as conn:
                existing = find_by_email(conn, data.email)
            if existing is not None:
                logger.info("Email already exists email=%s", data.email)
                return self._failure(
                    op,
                    ErrorCode.CONSTRAINT_VIOLATION,
                    f"Email already exists: {data.email}",
                    field="email",
                )

        with trace_span("persist"):
            created = self._persist_node(op, NodeKind.USER, data.name, data.email)
        if isinstance(created, ServiceResult):
            return created

        logger.info("User created id=%s", created.id)
        return ServiceResult(ok=True, op=op, data=created.summary())

    @traced
    def create_group(self, name: str, *, parent_id: str | None = None) -> ServiceResult:
        """Create a GROUP node, optionally linked under *parent_id*.

        A group whose parent link is refused (cycle, or parent gone) is
        deleted again when ``hierarchy.discard_orphans`` is set, else it
        stays as an unlinked root. A storage failure while propagating
        the link leaves the group in place, unlinked.
        """
        op = "create_group"
        logger.info("Creating group name=%s parent_id=%s", name, parent_id)

        with trace_span("validate"):
            try:
                data = CreateGroupInput.model_validate(
                    {"name": name, "parent_id": parent_id}, context=self._validation_context()
                )
            except ValidationError as exc:
                return self._failure(
                    op, ErrorCode.VALIDATION_FAILED, format_validation_errors(exc)
                )

        parent_key = str(data.parent_id) if data.parent_id is not None else None

        if parent_key is not None:
            with trace_span("check_parent"), self._registry.engine.connect() as conn:
                rejected = self._check_group(op, conn, parent_key, role="Parent")
            if rejected is not None:
                return rejected

        with trace_span("persist"):
            created = self._persist_node(op, NodeKind.GROUP, data.name, None)
        if isinstance(created, ServiceResult):
            return created

        result_data: dict[str, Any] = {**created.summary(), "parent_id": parent_key}
        if parent_key is None:
            logger.info("Group created id=%s", created.id)
            return ServiceResult(ok=True, op=op, data=result_data)

        with trace_span("link") as span:
            refused: ServiceResult | None = None
            try:
                with self._registry.transaction() as txn:
                    # Re-checked under the write lock; the parent may have been deleted.
                    refused = self._check_group(op, txn.conn, parent_key, role="Parent")
                    if refused is None and would_create_cycle(txn.conn, created.id, parent_key):
                        logger.info(
                            "Creating this link would create a cycle child=%s parent=%s",
                            created.id,
                            parent_key,
                        )
                        refused = self._failure(
                            op, ErrorCode.CYCLE_DETECTED, "Cannot create cycle in hierarchy"
                        )
                    if refused is not None:
                        refused = self._with_orphan_detail(
                            refused,
                            node_id=created.id,
                            parent_id=parent_key,
                            discarded=self._settle_orphan(txn.conn, created.id),
                        )
                    else:
                        pairs = link(txn.conn, created.id, parent_key)
                        if span:
                            span.annotate("pairs", pairs)
            except SQLAlchemyError as exc:
                logger.error("Link propagation failed group=%s: %s", created.id, exc)
                return self._failure(
                    op,
                    ErrorCode.LINK_PROPAGATION_FAILED,
                    f"Group created but could not be linked under {parent_key}: {exc}",
                    node_id=created.id,
                    parent_id=parent_key,
                )

        if refused is not None:
            return refused

        logger.info("Group created id=%s parent_id=%s", created.id, parent_key)
        return ServiceResult(ok=True, op=op, data=result_data)

    @traced
    def associate_user_to_group(self, user_id: str, group_id: str) -> ServiceResult:
        """Link an existing USER under an existing GROUP."""
        op = "associate_user_to_group"
        logger.info("Associating user to group user_id=%s group_id=%s", user_id, group_id)
        warnings: list[str] = []

        with trace_span("validate"):
            try:
                data = AssociateInput.model_validate({"user_id": user_id, "group_id": group_id})
            except ValidationError as exc:
                return self._failure(
                    op, ErrorCode.VALIDATION_FAILED, format_validation_errors(exc)
                )
            user_key, group_key = str(data.user_id), str(data.group_id)

            with self._registry.engine.connect() as conn:
                rejected = self._check_user(op, conn, user_key) or self._check_group(
                    op, conn, group_key, role="Group"
                )
            if rejected is not None:
                return rejected

        with trace_span("link") as span:
            try:
                with self._registry.transaction() as txn:
                    # Re-checked under the write lock; either node may have been deleted.
                    rejected = self._check_user(op, txn.conn, user_key) or self._check_group(
                        op, txn.conn, group_key, role="Group"
                    )
                    if rejected is not None:
                        return rejected
                    if would_create_cycle(txn.conn, user_key, group_key):
                        logger.info(
                            "Creating this association would create a cycle "
                            "user_id=%s group_id=%s",
                            user_key,
                            group_key,
                        )
                        return self._failure(
                            op,
                            ErrorCode.CYCLE_DETECTED,
                            "Cannot create cycle in hierarchy",
                            child_id=user_key,
                            parent_id=group_key,
                        )
                    if get_depth(txn.conn, group_key, user_key) == 1:
                        warnings.append(f"User {user_key} is already a member of {group_key}")
                    else:
                        pairs = link(txn.conn, user_key, group_key)
                        if span:
                            span.annotate("pairs", pairs)
            except SQLAlchemyError as exc:
                logger.error(
                    "Error associating user to group user_id=%s group_id=%s: %s",
                    user_key,
                    group_key,
                    exc,
                )
                return self._failure(
                    op,
                    ErrorCode.LINK_PROPAGATION_FAILED,
                    f"Could not link {user_key} under {group_key}: {exc}",
                    child_id=user_key,
                    parent_id=group_key,
                )

        logger.info("User associated to group user_id=%s group_id=%s", user_key, group_key)
        return ServiceResult(
            ok=True,
            op=op,
            data={"user_id": user_key, "group_id": group_key},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validation_context(self) -> dict[str, Any]:
        return {"max_name_length": self._registry.settings.hierarchy.max_name_length}

    def _persist_node(
        self,
        op: str,
        kind: NodeKind,
        name: str,
        email: str | None,
    ) -> NodeRecord | ServiceResult:
        """Create the node and its self-link atomically."""
        try:
            with self._registry.transaction() as txn:
                node = create_node(txn.conn, kind, name, email)
                insert_self_link(txn.conn, node.id)
        except ConstraintViolation as exc:
            logger.info("Constraint violation on %s: %s", exc.field, exc)
            return self._failure(op, ErrorCode.CONSTRAINT_VIOLATION, str(exc), field=exc.field)
        except SQLAlchemyError as exc:
            logger.error("Error creating %s node: %s", kind, exc)
            return self._failure(op, ErrorCode.TRANSACTION_FAILED, f"Could not create node: {exc}")
        return node

    def _check_user(self, op: str, conn: Connection, node_id: str) -> ServiceResult | None:
        """NOT_FOUND / INVALID_NODE_KIND unless *node_id* is an existing USER."""
        node = find_by_id(conn, node_id)
        if node is None:
            logger.info("User node not found user_id=%s", node_id)
            return self._failure(
                op, ErrorCode.NOT_FOUND, f"User not found: {node_id}", id=node_id
            )
        if node.kind is not NodeKind.USER:
            logger.info("Node is not a USER user_id=%s", node_id)
            return self._failure(
                op,
                ErrorCode.INVALID_NODE_KIND,
                "Node must be a USER",
                id=node_id,
                kind=str(node.kind),
            )
        return None

    def _check_group(
        self,
        op: str,
        conn: Connection,
        node_id: str,
        *,
        role: str,
    ) -> ServiceResult | None:
        """NOT_FOUND / INVALID_NODE_KIND unless *node_id* is an existing GROUP."""
        node = find_by_id(conn, node_id)
        if node is None:
            logger.info("%s node not found id=%s", role, node_id)
            return self._failure(
                op, ErrorCode.NOT_FOUND, f"{role} node not found: {node_id}", id=node_id
            )
        if node.kind is not NodeKind.GROUP:
            logger.info("%s node is not a GROUP id=%s", role, node_id)
            return self._failure(
                op,
                ErrorCode.INVALID_NODE_KIND,
                f"{role} must be a GROUP",
                id=node_id,
                kind=str(node.kind),
            )
        return None

    @staticmethod
    def _with_orphan_detail(result: ServiceResult, **detail: Any) -> ServiceResult:
        assert result.error is not None
        error = result.error.model_copy(update={"detail": {**result.error.detail, **detail}})
        return result.model_copy(update={"error": error})

    def _settle_orphan(self, conn: Connection, node_id: str) -> bool:
        """Apply the orphan policy to a group whose link was refused."""
        if not self._registry.settings.hierarchy.discard_orphans:
            logger.info("Keeping unlinked group id=%s", node_id)
            return False
        delete_node(conn, node_id)
        logger.info("Discarded unlinked group id=%s", node_id)
        return True
