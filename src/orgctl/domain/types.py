"""Node kinds and error codes.

``NodeKind`` is closed: every kind check (parent must be a GROUP,
association target must be a USER) branches on exactly these two values.
"""

from __future__ import annotations

from enum import StrEnum


class NodeKind(StrEnum):
    """The two kinds of node in the organization graph."""

    USER = "USER"
    GROUP = "GROUP"


class ErrorCode(StrEnum):
    """Failure codes carried by ``ServiceError.code``."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_NODE_KIND = "INVALID_NODE_KIND"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    LINK_PROPAGATION_FAILED = "LINK_PROPAGATION_FAILED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"


# Transport status for calling layers that speak HTTP semantics.
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_NODE_KIND: 422,
    ErrorCode.CYCLE_DETECTED: 409,
    ErrorCode.CONSTRAINT_VIOLATION: 409,
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.LINK_PROPAGATION_FAILED: 500,
    ErrorCode.TRANSACTION_FAILED: 500,
}


def status_for(code: str) -> int:
    """HTTP-style status for an error code string (500 when unknown)."""
    try:
        return ERROR_STATUS[ErrorCode(code)]
    except ValueError:
        return 500
