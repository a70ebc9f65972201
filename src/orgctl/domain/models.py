"""Input shapes and result rows for hierarchy operations.

Input models are validated by the service layer before any storage
access; a failed validation never touches the database. The maximum name
length is read from the validation context (``max_name_length``) so the
``[hierarchy]`` config section can tighten it.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from orgctl.domain.types import NodeKind

DEFAULT_MAX_NAME_LENGTH = 255
EMAIL_MAX_LENGTH = 255


def generate_node_id() -> str:
    """New opaque node identifier (UUID4, canonical lowercase form)."""
    return str(uuid.uuid4())


def _check_name(value: str, info: ValidationInfo) -> str:
    limit = DEFAULT_MAX_NAME_LENGTH
    if info.context:
        limit = int(info.context.get("max_name_length", limit))
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    if len(value) > limit:
        raise ValueError(f"name must be at most {limit} characters")
    return value


class CreateUserInput(BaseModel):
    """Shape of a create-user request."""

    model_config = {"frozen": True}

    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info)

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _email_fits_column(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
        return value


class CreateGroupInput(BaseModel):
    """Shape of a create-group request."""

    model_config = {"frozen": True}

    name: str
    parent_id: uuid.UUID | None = None

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info)


class AssociateInput(BaseModel):
    """Shape of an associate-user-to-group request."""

    model_config = {"frozen": True}

    user_id: uuid.UUID
    group_id: uuid.UUID


class HierarchyEntry(BaseModel):
    """One row of an ancestor / descendant / organization listing."""

    model_config = {"frozen": True}

    id: str
    name: str
    depth: int = Field(ge=1)


class NodeRecord(BaseModel):
    """A persisted node as seen by services."""

    model_config = {"frozen": True}

    id: str
    kind: NodeKind
    name: str
    email: str | None = None
    created_at: str
    updated_at: str

    def summary(self) -> dict[str, Any]:
        """Public fields returned by create operations."""
        data: dict[str, Any] = {"id": self.id, "kind": str(self.kind), "name": self.name}
        if self.kind is NodeKind.USER:
            data["email"] = self.email
        return data


def format_validation_errors(exc: ValidationError) -> str:
    """Flatten pydantic errors to ``field: message; ...``."""
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "input"
        msg = str(err["msg"]).removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}")
    return "; ".join(parts)
