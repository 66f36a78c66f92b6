"""Shared pytest fixtures and collaborator fakes for voiceform tests."""

from __future__ import annotations

import asyncio
from collections.abc import Generator

import pytest
from click.testing import CliRunner

from voiceform.domain.fields import TAX_FORM_FIELDS, FieldRegistry
from voiceform.services.collaborators import (
    ErrorCallback,
    Notification,
    SubmissionReceipt,
    TranscriptCallback,
)
from voiceform.services.telemetry import _current_span, disable_telemetry
from voiceform.services.voice_form import VoiceFormService


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` CLI runs enable telemetry on the test thread's context."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _no_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep a developer's voiceform.toml or VOICEFORM_* env out of the tests."""
    monkeypatch.delenv("VOICEFORM_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeSpeech:
    """Speech provider driven by the test through :meth:`say` / :meth:`fail`."""

    def __init__(self) -> None:
        self.on_transcript: TranscriptCallback | None = None
        self.on_error: ErrorCallback | None = None
        self.starts = 0
        self.stops = 0

    def start(self, on_transcript: TranscriptCallback, on_error: ErrorCallback) -> None:
        self.on_transcript = on_transcript
        self.on_error = on_error
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1

    def say(self, transcript: str) -> None:
        assert self.on_transcript is not None, "provider not started"
        self.on_transcript(transcript)

    def fail(self, error: str) -> None:
        assert self.on_error is not None, "provider not started"
        self.on_error(error)


class FakePermission:
    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.requests = 0

    async def request(self) -> bool:
        self.requests += 1
        return self.granted


class RecordingFocus:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def focus(self, field_id: str) -> None:
        self.calls.append(field_id)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)


class RecordingSubmitter:
    """Submitter that records snapshots and accepts (or rejects) all of them."""

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.received: list[dict[str, str]] = []

    def submit(self, values: dict[str, str]) -> SubmissionReceipt:
        self.received.append(dict(values))
        if self.accept:
            return SubmissionReceipt(accepted=True, values=values)
        return SubmissionReceipt(
            accepted=False, values=values, errors={"fullName": "Full name is required"}
        )


@pytest.fixture
def registry() -> FieldRegistry:
    return FieldRegistry.default()


@pytest.fixture
def small_registry() -> FieldRegistry:
    """Registry with just fullName, email and ssn."""
    return FieldRegistry(TAX_FORM_FIELDS[:3])


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def focus() -> RecordingFocus:
    return RecordingFocus()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def submitter() -> RecordingSubmitter:
    return RecordingSubmitter()


@pytest.fixture
def denied_service(
    registry: FieldRegistry, speech: FakeSpeech, notifier: RecordingNotifier
) -> VoiceFormService:
    """Service whose microphone permission request is refused."""
    return VoiceFormService(
        registry, speech=speech, permission=FakePermission(granted=False), notifier=notifier
    )


@pytest.fixture
def service(
    registry: FieldRegistry,
    speech: FakeSpeech,
    focus: RecordingFocus,
    notifier: RecordingNotifier,
    submitter: RecordingSubmitter,
) -> VoiceFormService:
    """Idle service over the default tax form with recording collaborators."""
    return VoiceFormService(
        registry,
        speech=speech,
        permission=FakePermission(),
        focus=focus,
        notifier=notifier,
        submitter=submitter,
    )


@pytest.fixture
def listening(service: VoiceFormService) -> VoiceFormService:
    """The :func:`service` fixture after a successful ``start_listening``."""
    result = asyncio.run(service.start_listening())
    assert result.ok, result.error
    return service
