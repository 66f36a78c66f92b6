"""Subcommand modules for voiceform.

Provides register_commands() which uses deferred imports to keep
``voiceform --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from voiceform.commands.catalog import classify, commands, fields, normalize
    from voiceform.commands.listen import listen

    cli.add_command(fields)
    cli.add_command(commands)
    cli.add_command(classify)
    cli.add_command(normalize)
    cli.add_command(listen)
