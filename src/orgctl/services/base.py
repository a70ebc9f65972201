"""BaseService — abstract foundation for all orgctl services.

Every service receives a :class:`Registry` at construction time. The
Registry provides transactional access to the database and the graph
view. Services own their transaction boundaries via
``self._registry.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from orgctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from orgctl.infrastructure.registry import Registry

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class HierarchyLinker(BaseService):
            def create_group(self, name: str, ...) -> ServiceResult:
                with self._registry.transaction() as txn:
                    ...
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str,
        *,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build an ``ok=False`` result."""
        return ServiceResult(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(code=str(code), message=message, detail=detail),
        )
