"""What every service method hands back: ServiceResult, maybe with a ServiceError.

Services never raise for an expected failure; they return ``ok=False``.
The CLI and the MCP tools map ``error.code`` to their own failure
signalling.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field

from orgctl.domain.types import status_for


class ServiceError(BaseModel):
    """Why an operation failed: an ErrorCode value, a message and context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> int:
        """HTTP-style status for transports that need one."""
        return status_for(self.code)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False exactly when ``error`` is set.
        op: Operation name, e.g. ``"create_group"``; renderers dispatch on it.
        data: Payload of a successful call.
        warnings: Things worth telling the caller that did not stop the call.
        error: The failure, when ``ok`` is False.
        meta: Extras such as the telemetry span tree.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
