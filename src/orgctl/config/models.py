"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, orgctl.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- orgctl.toml sections ---


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the settings root.
    path: str = ".orgctl/orgctl.db"
    busy_timeout: float = Field(default=30.0, gt=0)
    journal_mode: Literal["WAL", "DELETE", "TRUNCATE", "MEMORY"] = "WAL"


class HierarchyConfig(BaseModel):
    """[hierarchy] section."""

    model_config = {"frozen": True}

    # Delete a freshly created group when its parent link is refused as a cycle.
    discard_orphans: bool = True
    max_name_length: int = Field(default=255, ge=1, le=255)


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"


class OrgConfig(BaseModel):
    """Root config model — all sections."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
