"""Tests for the terminal collaborators used by ``voiceform listen``."""

from __future__ import annotations

import asyncio
import io
import logging

import pytest

from voiceform.domain.types import NotificationVariant
from voiceform.infrastructure.terminal import (
    ConsoleNotificationSink,
    LoggingFocusController,
    StaticPermissionGate,
    StreamSpeechProvider,
    interim_updates,
)
from voiceform.services.collaborators import Notification


class _Recorder:
    def __init__(self) -> None:
        self.transcripts: list[str] = []
        self.errors: list[str] = []

    def on_transcript(self, text: str) -> None:
        self.transcripts.append(text)

    def on_error(self, code: str) -> None:
        self.errors.append(code)


def _provider(text: str, **kwargs: bool) -> tuple[StreamSpeechProvider, _Recorder]:
    provider = StreamSpeechProvider(io.StringIO(text), **kwargs)
    recorder = _Recorder()
    provider.start(recorder.on_transcript, recorder.on_error)
    return provider, recorder


class TestInterimUpdates:
    def test_grows_word_by_word(self) -> None:
        assert list(interim_updates("go to  email")) == ["go", "go to", "go to email"]

    def test_blank(self) -> None:
        assert list(interim_updates("   ")) == []


class TestStreamSpeechProvider:
    def test_final_only(self) -> None:
        provider, rec = _provider("set name to Jane\n\nnext field\n", interim_results=False)
        assert provider.pump() == 2
        assert rec.transcripts == ["set name to Jane", "next field"]

    def test_interim_results(self) -> None:
        provider, rec = _provider("next field\n")
        assert provider.pump() == 2
        assert rec.transcripts == ["next", "next field"]

    def test_error_lines(self) -> None:
        provider, rec = _provider("!network\nnext field\n", interim_results=False)
        provider.pump()
        assert rec.errors == ["network"]
        assert rec.transcripts == ["next field"]

    def test_stop_from_callback_halts_delivery(self) -> None:
        provider = StreamSpeechProvider(io.StringIO("one two\nthree\n"))
        seen: list[str] = []

        def on_transcript(text: str) -> None:
            seen.append(text)
            provider.stop()

        provider.start(on_transcript, lambda _code: None)
        assert provider.pump() == 1
        assert seen == ["one"]
        assert not provider.running

    def test_single_utterance_when_not_continuous(self) -> None:
        provider, rec = _provider("first\nsecond\n", continuous=False, interim_results=False)
        provider.pump()
        assert rec.transcripts == ["first"]
        assert not provider.running

    def test_pump_requires_start(self) -> None:
        provider = StreamSpeechProvider(io.StringIO("x\n"))
        with pytest.raises(RuntimeError, match="not been started"):
            provider.pump()

    def test_double_start(self) -> None:
        provider, rec = _provider("")
        with pytest.raises(RuntimeError, match="already started"):
            provider.start(rec.on_transcript, rec.on_error)


class TestStaticPermissionGate:
    def test_granted(self) -> None:
        gate = StaticPermissionGate()
        assert asyncio.run(gate.request()) is True
        assert gate.requests == 1

    def test_denied(self) -> None:
        assert asyncio.run(StaticPermissionGate(granted=False).request()) is False


class TestConsoleNotificationSink:
    def test_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = ConsoleNotificationSink(color=False)
        sink.notify(Notification(title="Field updated", description='Set name to "Jane"'))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == 'Field updated: Set name to "Jane"'

    def test_destructive(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = ConsoleNotificationSink(err=False, color=False)
        sink.notify(
            Notification(
                title="Microphone access denied",
                description="Please allow microphone access.",
                variant=NotificationVariant.DESTRUCTIVE,
            )
        )
        assert "Microphone access denied:" in capsys.readouterr().out


class TestLoggingFocusController:
    def test_history_and_log(self, caplog: pytest.LogCaptureFixture) -> None:
        focus = LoggingFocusController()
        with caplog.at_level(logging.INFO, logger="voiceform.infrastructure.terminal"):
            focus.focus("email")
            focus.focus("ssn")
        assert focus.history == ["email", "ssn"]
        assert "Focus moved to ssn" in caplog.text
