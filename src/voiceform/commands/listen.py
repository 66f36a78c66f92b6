"""Command: run a voice form session over transcripts read line by line."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TextIO

import click

from voiceform.commands._base import VfCommand

if TYPE_CHECKING:
    from voiceform.commands._context import AppContext


@click.command(
    cls=VfCommand,
    spoken=True,
    examples="""\
  voiceform listen
  voiceform listen --input session.txt
  voiceform listen --no-interim --input session.txt
  echo "set name to Jane Doe" | voiceform --json listen
  voiceform listen --deny-mic""",
)
@click.option(
    "-i",
    "--input",
    "input_file",
    type=click.File("r"),
    default="-",
    help="Read transcripts from FILE instead of stdin (one utterance per line).",
)
@click.option("--deny-mic", is_flag=True, help="Simulate a refused microphone permission.")
@click.option(
    "--interim/--no-interim",
    default=None,
    help="Deliver word-by-word interim transcripts (default from [recognition]).",
)
@click.pass_obj
def listen(app: AppContext, input_file: TextIO, deny_mic: bool, interim: bool | None) -> None:
    """Fill the form by voice: each input line is one recognized utterance.

    Lines starting with "!" report a recognizer error (e.g. "!not-allowed").
    The session ends at end of input, on "stop listening", or after submit.
    Unrecognized commands and unknown fields are reported and skipped.
    """
    from voiceform.infrastructure.terminal import (
        ConsoleNotificationSink,
        LoggingFocusController,
        StaticPermissionGate,
        StreamSpeechProvider,
    )
    from voiceform.services.collaborators import NotificationSink, NullNotificationSink
    from voiceform.services.result import ServiceResult
    from voiceform.services.voice_form import VoiceFormService

    recognition = app.settings.recognition
    provider = StreamSpeechProvider(
        input_file,
        language=recognition.language,
        continuous=recognition.continuous,
        interim_results=recognition.interim_results if interim is None else interim,
    )
    notifier: NotificationSink
    if app.settings.quiet or app.settings.json_output:
        notifier = NullNotificationSink()
    else:
        notifier = ConsoleNotificationSink()

    svc = VoiceFormService(
        app.registry,
        speech=provider,
        permission=StaticPermissionGate(granted=not deny_mic),
        focus=LoggingFocusController(),
        notifier=notifier,
        plugins=app.plugins,
        notify_unrecognized=app.settings.session.notify_unrecognized,
    )

    started = asyncio.run(svc.start_listening())
    if not started.ok:
        app.emit(started)
        return

    processed = provider.pump()
    if svc.is_listening:
        svc.stop_listening()

    session = svc.session
    app.emit(
        ServiceResult(
            ok=True,
            op="listen",
            data={
                "values": session.snapshot(),
                "focused_field": session.focused_field,
                "listening": session.is_listening,
                "transcript": session.transcript,
                "processed": processed,
            },
        )
    )
