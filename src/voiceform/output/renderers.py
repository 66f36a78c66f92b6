"""Human-readable views of ServiceResult, one renderer per operation.

Catalog ops (fields, commands) render as tables, single voice commands as
indented key-value lines, and session summaries as a values table with
the focused field marked. Ops without a dedicated renderer get the generic
key-value view.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from voiceform.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from voiceform.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    # List results: one id per line
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    for key in ("value", "field_id"):
        if key in result.data:
            return str(result.data[key])
    if "command" in result.data:
        return str(result.data["command"].get("kind", ""))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract an ID from a dict item (fields, catalog entries)."""
    if isinstance(item, dict):
        for key in ("id", "kind"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="vf.ok")
    op = Text(f"  {result.op}", style="vf.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="vf.key")
    if key == "field_id" or key == "focused_field":
        v = Text(str(value), style="vf.field")
    elif key == "value":
        v = Text(str(value), style="vf.value")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 100:
        style = "bold red"
    elif duration > 10:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"

    annotations = span_data.get("annotations") or {}
    if annotations:
        extras = ", ".join(f"{ak}={av}" for ak, av in annotations.items())
        line += f"  ({extras})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _values_table(values: dict[str, str], focused: str | None) -> Table:
    """Build a Rich Table of field values, marking the focused field."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("Field", style="vf.field", no_wrap=True)
    table.add_column("Value")

    for field_id, value in values.items():
        marker = Text(">", style="vf.focus") if field_id == focused else Text("")
        shown = Text(value, style="vf.value") if value else Text("(empty)", style="vf.empty")
        table.add_row(marker, field_id, shown)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="vf.error")
    op = Text(f"  {result.op}", style="vf.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    # Validation messages are the point of a rejected submission; always show them.
    field_errors = err.detail.get("errors") if err else None
    if isinstance(field_errors, dict):
        for field_id, message in field_errors.items():
            console.print(f"  [vf.field]{field_id}[/vf.field]: {message}")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_fields(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the field registry in navigation order."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="vf.field", no_wrap=True)
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Aliases")

    for item in items:
        kind = str(item.get("kind", ""))
        table.add_row(
            str(item.get("order", "")),
            str(item.get("id", "")),
            str(item.get("label", "")),
            Text(kind, style=style_for_kind(kind)),
            ", ".join(item.get("aliases", [])),
        )

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} fields")


def _render_commands(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the spoken-command help catalog."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Command", style="vf.value")
    table.add_column("Description")
    table.add_column("Example", style="dim")
    if verbose:
        table.add_column("Kind", style="vf.op")

    for item in items:
        row = [
            str(item.get("command", "")),
            str(item.get("description", "")),
            f'"{item.get("example", "")}"',
        ]
        if verbose:
            row.append(str(item.get("kind", "")))
        table.add_row(*row)

    console.print(table)


def _render_classify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a classified transcript and its command payload."""
    _status_line(console, result)
    d = result.data
    _field(console, "transcript", d.get("transcript", ""))
    command = d.get("command", {})
    _field(console, "command", command.get("kind", "?"))
    for key, value in command.items():
        if key != "kind":
            _field(console, key, value)
    if d.get("pattern"):
        _field(console, "pattern", d["pattern"])
    if verbose:
        _render_meta(console, result)


def _render_normalize(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("kind", "raw", "value"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── Session renderers ─────────────────────────────────────────────────


def _render_session_op(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single applied voice command."""
    _status_line(console, result)
    for key in ("field_id", "value", "raw_value", "cleared", "boundary", "focused_field"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    _field(console, "listening", "yes" if result.data.get("listening") else "no")
    if verbose:
        _render_meta(console, result)


def _render_form(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render submit and session summaries as a values table."""
    _status_line(console, result)
    values = result.data.get("values", {})
    console.print(_values_table(values, result.data.get("focused_field")))
    for key in ("processed",):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Catalogs
    "list_fields": _render_fields,
    "list_commands": _render_commands,
    "classify": _render_classify,
    "normalize": _render_normalize,
    # Session
    "set_field": _render_session_op,
    "clear_field": _render_session_op,
    "clear_all": _render_session_op,
    "focus_field": _render_session_op,
    "focus_changed": _render_session_op,
    "next_field": _render_session_op,
    "previous_field": _render_session_op,
    "start_listening": _render_session_op,
    "stop_listening": _render_session_op,
    "reset": _render_session_op,
    "submit": _render_form,
    "listen": _render_form,
}
