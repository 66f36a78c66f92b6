"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from voiceform.config.logging import MAX_TRANSCRIPT_CHARS, configure_logging, transcript_context
from voiceform.services.voice_form import VoiceFormService


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    vf = logging.getLogger("voiceform")
    vf_level = vf.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    vf.setLevel(vf_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("voiceform").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger("voiceform").level == logging.WARNING

    def test_json_lines(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("voiceform.test").warning("mic check", attempt=2)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "mic check"
        assert parsed["attempt"] == 2
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "voiceform.test"
        assert "timestamp" in parsed

    def test_stdlib_module_loggers_are_structured(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("voiceform.services.voice_form").debug("Applying set_field")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Applying set_field"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "voiceform.services.voice_form"

    @pytest.mark.parametrize("name", ["pluggy", "asyncio"])
    def test_dependency_debug_suppressed(
        self, capfd: pytest.CaptureFixture[str], name: str
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger(name).debug("hook noise")
        assert capfd.readouterr().err == ""

    def test_idempotent(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


def _json_lines(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestTranscriptContext:
    def test_binds_transcript(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with transcript_context("go to email", command="focus_field"):
            logging.getLogger("voiceform.domain").debug("resolving")
        logging.getLogger("voiceform.domain").debug("after")
        inside, after = _json_lines(capfd.readouterr().err)
        assert inside["transcript"] == "go to email"
        assert inside["command"] == "focus_field"
        assert "transcript" not in after

    def test_long_transcripts_are_clipped(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with transcript_context("set occupation to " + "very " * 30 + "busy"):
            structlog.get_logger("voiceform.test").info("applied")
        (line,) = _json_lines(capfd.readouterr().err)
        assert len(line["transcript"]) == MAX_TRANSCRIPT_CHARS
        assert line["transcript"].endswith("...")

    def test_session_logs_carry_the_utterance(
        self, capfd: pytest.CaptureFixture[str], listening: VoiceFormService
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        listening.handle_transcript("set salary to 50k")
        lines = _json_lines(capfd.readouterr().err)
        applying = next(line for line in lines if line["event"] == "Applying set_field")
        assert applying["transcript"] == "set salary to 50k"
        assert applying["command"] == "set_field"
