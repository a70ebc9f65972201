"""SQLite database engine, schema, node store and closure store via SQLAlchemy Core."""

from orgctl.infrastructure.database.closure import (
    get_ancestors,
    get_descendants,
    get_organizations,
    has_path,
    insert_self_link,
    link,
)
from orgctl.infrastructure.database.cycles import would_create_cycle
from orgctl.infrastructure.database.engine import create_db_engine, init_database
from orgctl.infrastructure.database.nodes import (
    ConstraintViolation,
    create_node,
    find_by_email,
    find_by_id,
)
from orgctl.infrastructure.database.schema import closure, metadata, nodes

__all__ = [
    "ConstraintViolation",
    "closure",
    "create_db_engine",
    "create_node",
    "find_by_email",
    "find_by_id",
    "get_ancestors",
    "get_descendants",
    "get_organizations",
    "has_path",
    "init_database",
    "insert_self_link",
    "link",
    "metadata",
    "nodes",
    "would_create_cycle",
]
