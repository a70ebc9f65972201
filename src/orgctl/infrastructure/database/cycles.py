"""Cycle Guard — decides whether a proposed parent link would close a loop.

Linking *child* under *parent* makes every ancestor of *parent* an
ancestor of every descendant of *child*. If *parent* is already beneath
*child* (or is *child*), *child* would become its own ancestor.

Run it inside the same write transaction as
:func:`orgctl.infrastructure.database.closure.link`; a check made in an
earlier transaction can be invalidated by a concurrent writer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from orgctl.infrastructure.database.closure import has_path

if TYPE_CHECKING:
    from sqlalchemy import Connection


def would_create_cycle(conn: Connection, child_id: str, parent_id: str) -> bool:
    """True iff *parent_id* is *child_id* or already a descendant of it."""
    if child_id == parent_id:
        return True
    return has_path(conn, child_id, parent_id)
