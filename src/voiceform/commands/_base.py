"""Click base classes with an eager ``--examples`` flag.

``--examples`` prints the shell examples passed to the decorator. Commands
declared with ``spoken=True`` (the ones that take transcripts) also list
what can be *said*: the spoken-command catalog with one sample utterance
each.
"""

from __future__ import annotations

from typing import Any

import click

from voiceform.domain.commands import COMMAND_HELP


def spoken_commands_text() -> str:
    """The spoken-command catalog as aligned ``phrase  "example"`` lines."""
    width = max(len(entry.command) for entry in COMMAND_HELP)
    return "\n".join(f'  {entry.command:<{width}}  "{entry.example}"' for entry in COMMAND_HELP)


class _ExamplesMixin:
    """Adds the ``--examples`` option; shared by VfCommand and VfGroup."""

    examples: str | None
    spoken: bool
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None, spoken: bool) -> None:
        self.examples = examples
        self.spoken = spoken
        if examples or spoken:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        if self.examples:
            click.echo(self.examples)
        if self.spoken:
            click.echo("\nSpoken commands:")
            click.echo(spoken_commands_text())
        ctx.exit(0)


class VfCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=`` and ``spoken=`` in its decorator."""

    def __init__(
        self, *args: Any, examples: str | None = None, spoken: bool = False, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples, spoken)


class VfGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`VfCommand`."""

    command_class = VfCommand

    def __init__(
        self, *args: Any, examples: str | None = None, spoken: bool = False, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples, spoken)
