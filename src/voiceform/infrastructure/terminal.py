"""Terminal implementations of the form session collaborators.

``voiceform listen`` wires these together: transcripts come from a text
stream (stdin or a script file), notifications go to stderr, focus
changes are logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TextIO

import click

from voiceform.domain.types import NotificationVariant
from voiceform.services.collaborators import (
    ErrorCallback,
    Notification,
    TranscriptCallback,
)

logger = logging.getLogger(__name__)

# Input lines starting with this prefix report a recognizer error code
# instead of a transcript, e.g. ``!not-allowed`` or ``!network``.
ERROR_PREFIX = "!"


def interim_updates(utterance: str) -> Iterator[str]:
    """Yield the growing transcripts a recognizer reports for *utterance*.

    One update per word, the last being the complete utterance.
    """
    words = utterance.split()
    for end in range(1, len(words) + 1):
        yield " ".join(words[:end])


class StreamSpeechProvider:
    """Speech provider that treats each line of *stream* as one utterance.

    ``start`` only registers the callbacks; :meth:`pump` drives delivery
    until the stream ends or the provider is stopped (the session stops it
    on "stop listening" and after submit).

    Args:
        stream: Text source, one utterance per line.
        language: Recognition language tag, logged for parity with real
            recognizers.
        continuous: When False, recognition ends after the first utterance.
        interim_results: Deliver word-by-word growing transcripts before
            the final one.
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        language: str = "en-US",
        continuous: bool = True,
        interim_results: bool = True,
    ) -> None:
        self._stream = stream
        self.language = language
        self.continuous = continuous
        self.interim_results = interim_results
        self._on_transcript: TranscriptCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, on_transcript: TranscriptCallback, on_error: ErrorCallback) -> None:
        if self._running:
            raise RuntimeError("Recognition already started")
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._running = True
        logger.debug("Recognition started (language=%s)", self.language)

    def stop(self) -> None:
        if self._running:
            logger.debug("Recognition stopped")
        self._running = False

    def pump(self) -> int:
        """Deliver utterances from the stream; return the number of updates sent."""
        if self._on_transcript is None or self._on_error is None:
            raise RuntimeError("Recognition has not been started")

        delivered = 0
        for line in self._stream:
            if not self._running:
                break
            utterance = line.strip()
            if not utterance:
                continue

            if utterance.startswith(ERROR_PREFIX):
                self._on_error(utterance[len(ERROR_PREFIX) :].strip())
                delivered += 1
                continue

            updates = interim_updates(utterance) if self.interim_results else iter([utterance])
            for update in updates:
                if not self._running:
                    break
                self._on_transcript(update)
                delivered += 1

            if not self.continuous:
                self.stop()
        return delivered


class StaticPermissionGate:
    """Permission gate with a fixed answer (``--deny-mic`` flips it)."""

    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.requests = 0

    async def request(self) -> bool:
        self.requests += 1
        return self.granted


class ConsoleNotificationSink:
    """Echo notifications to stderr; destructive ones in red."""

    def __init__(self, *, err: bool = True, color: bool | None = None) -> None:
        self._err = err
        self._color = color

    def notify(self, notification: Notification) -> None:
        title = notification.title
        if notification.variant is NotificationVariant.DESTRUCTIVE:
            title = click.style(title, fg="red", bold=True)
        else:
            title = click.style(title, bold=True)
        click.echo(f"{title}: {notification.description}", err=self._err, color=self._color)


class LoggingFocusController:
    """Focus controller for a UI-less session: record and log focus moves."""

    def __init__(self) -> None:
        self.history: list[str] = []

    def focus(self, field_id: str) -> None:
        self.history.append(field_id)
        logger.info("Focus moved to %s", field_id)
