"""Tests for request shapes and node records."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from orgctl.domain.models import (
    AssociateInput,
    CreateGroupInput,
    CreateUserInput,
    HierarchyEntry,
    NodeRecord,
    format_validation_errors,
    generate_node_id,
)
from orgctl.domain.types import NodeKind


class TestGenerateNodeId:
    def test_is_uuid4(self) -> None:
        node_id = generate_node_id()
        assert uuid.UUID(node_id).version == 4
        assert node_id == node_id.lower()

    def test_unique(self) -> None:
        assert len({generate_node_id() for _ in range(100)}) == 100


class TestCreateUserInput:
    def test_strips_whitespace(self) -> None:
        data = CreateUserInput(name="  Ada  ", email=" ada@example.com ")
        assert data.name == "Ada"
        assert data.email == "ada@example.com"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError, match="name must not be empty"):
            CreateUserInput(name="   ", email="ada@example.com")

    @pytest.mark.parametrize(
        "email",
        [
            "",
            "ada",
            "ada@",
            "ada@example",
            "a da@example.com",
            "a..b@x.com",
            "user@-x-.com",
            '"@"@x.y',
        ],
    )
    def test_invalid_email_rejected(self, email: str) -> None:
        with pytest.raises(ValidationError):
            CreateUserInput(name="Ada", email=email)

    def test_name_limit_from_context(self) -> None:
        with pytest.raises(ValidationError, match="at most 3 characters"):
            CreateUserInput.model_validate(
                {"name": "Ada L", "email": "ada@example.com"},
                context={"max_name_length": 3},
            )

    def test_default_name_limit(self) -> None:
        CreateUserInput(name="x" * 255, email="x@example.com")
        with pytest.raises(ValidationError):
            CreateUserInput(name="x" * 256, email="x@example.com")

    def test_domain_is_normalized(self) -> None:
        data = CreateUserInput(name="Ada", email="Ada@Example.COM")
        assert data.email == "Ada@example.com"


class TestCreateGroupInput:
    def test_parent_optional(self) -> None:
        assert CreateGroupInput(name="Eng").parent_id is None

    def test_parent_parsed_as_uuid(self) -> None:
        parent = generate_node_id()
        data = CreateGroupInput(name="Eng", parent_id=parent)
        assert str(data.parent_id) == parent

    def test_malformed_parent_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateGroupInput(name="Eng", parent_id="not-a-uuid")


class TestAssociateInput:
    def test_both_ids_required(self) -> None:
        with pytest.raises(ValidationError):
            AssociateInput.model_validate({"user_id": generate_node_id()})


class TestHierarchyEntry:
    def test_depth_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HierarchyEntry(id="x", name="X", depth=0)


class TestNodeRecord:
    def _record(self, kind: NodeKind, email: str | None) -> NodeRecord:
        return NodeRecord(
            id="n1",
            kind=kind,
            name="N",
            email=email,
            created_at="2026-01-01T00:00:00+00:00",
            updated_at="2026-01-01T00:00:00+00:00",
        )

    def test_user_summary_includes_email(self) -> None:
        summary = self._record(NodeKind.USER, "n@example.com").summary()
        assert summary == {"id": "n1", "kind": "USER", "name": "N", "email": "n@example.com"}

    def test_group_summary_omits_email(self) -> None:
        assert "email" not in self._record(NodeKind.GROUP, None).summary()


class TestFormatValidationErrors:
    def test_joins_field_messages(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            CreateUserInput(name="", email="bad")
        message = format_validation_errors(excinfo.value)
        assert "name: name must not be empty" in message
        assert "email: value is not a valid email address" in message
        assert "Value error" not in message
