"""Commands: inspect fields and spoken commands, try the classifier and normalizer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from voiceform.commands._base import VfCommand

if TYPE_CHECKING:
    from voiceform.commands._context import AppContext
    from voiceform.services.catalog import CatalogService


def _service(app: AppContext) -> CatalogService:
    from voiceform.services.catalog import CatalogService

    return CatalogService(app.registry, plugins=app.plugins)


@click.command(
    cls=VfCommand,
    examples="""\
  voiceform fields
  voiceform --json fields
  voiceform -q fields""",
)
@click.pass_obj
def fields(app: AppContext) -> None:
    """List form fields in navigation order with their spoken aliases."""
    app.emit(_service(app).list_fields())


@click.command(
    cls=VfCommand,
    examples="""\
  voiceform commands
  voiceform -v commands""",
)
@click.pass_obj
def commands(app: AppContext) -> None:
    """Show the spoken commands the form understands."""
    app.emit(_service(app).list_commands())


@click.command(
    cls=VfCommand,
    spoken=True,
    examples="""\
  voiceform classify "set name to John Smith"
  voiceform classify "enter 50k for income"
  voiceform --json classify "go to email\"""",
)
@click.argument("transcript")
@click.pass_obj
def classify(app: AppContext, transcript: str) -> None:
    """Classify TRANSCRIPT into a form command without applying it."""
    app.emit(_service(app).classify(transcript))


@click.command(
    cls=VfCommand,
    examples="""\
  voiceform normalize date "January 15th, 1990"
  voiceform normalize currency "75k"
  voiceform normalize "filing status" "married filing jointly\"""",
)
@click.argument("kind")
@click.argument("value")
@click.pass_obj
def normalize(app: AppContext, kind: str, value: str) -> None:
    """Normalize VALUE as the field KIND would store it.

    KIND is a field kind (free-text, email, ssn, date, currency,
    enumeration, integer-count) or a spoken field name such as "income".
    """
    app.emit(_service(app).normalize(kind, value))
