"""Rich Console factory and theme for voiceform output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

VF_THEME = Theme(
    {
        "vf.ok": "bold green",
        "vf.error": "bold red",
        "vf.warning": "bold yellow",
        "vf.op": "bold cyan",
        "vf.key": "dim",
        "vf.field": "bold blue",
        "vf.value": "bold",
        "vf.empty": "dim italic",
        "vf.focus": "bold magenta",
        "vf.kind.text": "green",
        "vf.kind.structured": "blue",
        "vf.kind.choice": "yellow",
    }
)

_KIND_STYLES: dict[str, str] = {
    "free-text": "vf.kind.text",
    "email": "vf.kind.structured",
    "ssn": "vf.kind.structured",
    "date": "vf.kind.structured",
    "currency": "vf.kind.structured",
    "integer-count": "vf.kind.structured",
    "enumeration": "vf.kind.choice",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=VF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a field kind."""
    return _KIND_STYLES.get(kind, "")
