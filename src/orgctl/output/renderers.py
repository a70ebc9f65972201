"""Human-readable rendering of a ServiceResult.

Most operations print an ``OK  <op>`` line followed by ``key: value``
fields, in the order listed in ``_FIELDS``. Hierarchy listings become a
table and ``check`` groups its issues by category. With ``verbose`` the
result's meta block (telemetry span tree) is appended.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from rich.padding import Padding
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from orgctl.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from orgctl.services.result import ServiceResult

_NODE_KEYS = ("id", "kind", "name", "email", "parent_id", "created_at", "updated_at")

_FIELDS: dict[str, tuple[str, ...]] = {
    "create_user": _NODE_KEYS,
    "create_group": _NODE_KEYS,
    "get_node": _NODE_KEYS,
    "associate_user_to_group": ("user_id", "group_id"),
    "stats": ("users", "groups", "closure_edges"),
    "rebuild": ("nodes", "links", "rows", "changed", "removed"),
    "init": ("root", "config_path", "db_path"),
    "upgrade": ("applied_count", "pending_count", "current", "head", "message"),
}

# Listing op -> noun for the trailing count line.
_LISTINGS = {
    "get_node_ancestors": "node",
    "get_node_descendants": "node",
    "get_user_organizations": "group",
}

_SEVERITY_STYLES = {"error": "org.error", "warning": "org.warning"}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* through a buffered Rich console.

    Color codes only appear when Rich sees a terminal, so CliRunner and
    pipes get plain text.
    """
    console = create_console()

    if not result.ok:
        _error(console, result, verbose=verbose)
        return get_output(console).rstrip("\n")

    if result.op in _LISTINGS:
        _listing(console, result.data, _LISTINGS[result.op])
    elif result.op == "check":
        _check(console, result.data)
    else:
        console.print(Text.assemble(("OK", "org.ok"), (f"  {result.op}", "org.op")))
        _fields(console, result.data, _FIELDS.get(result.op))
        _trailer(console, result.op, result.data, verbose=verbose)

    if verbose and result.meta:
        _meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One id per line for listings, the new id for creations."""
    if not result.ok:
        reason = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {reason}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(i["id"]) for i in items if isinstance(i, dict) and "id" in i)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


def _field(console: Console, key: str, value: Any) -> None:
    if key == "id" or key.endswith("_id"):
        style = "org.id"
    elif key == "name":
        style = "org.name"
    elif key == "kind":
        style = style_for_kind(str(value))
    else:
        style = ""
    if isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(",", ":"))
    else:
        text = str(value)
    console.print(Text.assemble((f"  {key}: ", "org.key"), (text, style)))


def _fields(console: Console, data: Mapping[str, Any], keys: Iterable[str] | None) -> None:
    # Unknown ops print every field; known ops skip absent and None values.
    if keys is None:
        for key, value in data.items():
            _field(console, key, value)
        return
    for key in keys:
        if data.get(key) is not None:
            _field(console, key, data[key])


def _trailer(console: Console, op: str, data: Mapping[str, Any], *, verbose: bool) -> None:
    if op == "init":
        files = data.get("files_created", [])
        _field(console, "files_created", len(files))
        if verbose:
            for name in files:
                console.print(Text(f"    {name}"))
    elif op == "upgrade":
        for rev in data.get("pending", []):
            console.print(Text(f"    {rev.get('revision', '?')}  {rev.get('description', '')}"))


def _error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    err = result.error
    line = Text.assemble(("ERROR", "org.error"), (f"  {result.op}", "org.op"))
    if err is not None:
        line.append(f"  [{err.code}]", style="org.warning")
    line.append(" — " + (err.message if err else "Unknown error"))
    console.print(line)

    if verbose and err is not None and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


def _listing(console: Console, data: Mapping[str, Any], noun: str) -> None:
    items = data.get("items", [])
    count = data.get("count", len(items))
    if items:
        table = Table(pad_edge=False)
        table.add_column("Depth", style="org.depth", justify="right")
        table.add_column("ID", style="org.id", no_wrap=True)
        table.add_column("Name", style="org.name")
        for item in items:
            table.add_row(
                str(item.get("depth", "")), str(item.get("id", "")), str(item.get("name", ""))
            )
        console.print(table)
        console.print()
    console.print(f"{count} {noun}{'' if count == 1 else 's'}")


def _check(console: Console, data: Mapping[str, Any]) -> None:
    issues = data.get("issues", [])
    count = data.get("count", len(issues))
    if not count:
        console.print(
            f"[org.ok]OK[/org.ok]  No issues found "
            f"({data.get('nodes', 0)} nodes, {data.get('edges', 0)} rows)."
        )
        return

    grouped: defaultdict[str, list[Mapping[str, Any]]] = defaultdict(list)
    for issue in issues:
        grouped[str(issue.get("category", "unknown"))].append(issue)

    for category, members in grouped.items():
        console.print()
        console.print(Text(category, style="bold"))
        for issue in members:
            severity = str(issue.get("severity", "error"))
            line = Text("  ")
            line.append(severity, style=_SEVERITY_STYLES.get(severity, ""))
            line.append(f": {issue.get('message', '')}")
            console.print(line)

    console.print()
    plural = "" if count == 1 else "s"
    console.print(f"{count} issue{plural}; run 'orgctl check --rebuild' to repair")


def _span_label(span: Mapping[str, Any]) -> Text:
    duration = float(span.get("duration_ms", 0.0))
    label = Text(str(span.get("name", "?")))
    notes = span.get("annotations") or {}
    if notes:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")")
    if duration > 1000:
        timing = "bold red"
    elif duration > 100:
        timing = "yellow"
    else:
        timing = "dim"
    label.append(f"  {duration:.2f}ms", style=timing)
    return label


def _span_tree(span: Mapping[str, Any], parent: Tree | None = None) -> Tree:
    node = Tree(_span_label(span)) if parent is None else parent.add(_span_label(span))
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _meta(console: Console, meta: Mapping[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            console.print(Padding(_span_tree(value), (0, 0, 0, 4)))
        else:
            console.print(Text(f"    {key}: {value}"))
