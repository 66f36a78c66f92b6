"""Interfaces of the collaborators around the form session.

The session never touches audio, widgets, or toasts directly. It talks to
these protocols; the terminal front-end and tests provide implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from voiceform.domain.types import NotificationVariant

TranscriptCallback = Callable[[str], None]
ErrorCallback = Callable[[str], None]

# Recognition error code for a refused microphone.
PERMISSION_DENIED_ERROR = "not-allowed"


class Notification(BaseModel):
    """Human-readable status message (field updated, end of form, ...)."""

    model_config = {"frozen": True}

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


class SubmissionReceipt(BaseModel):
    """Outcome reported by the submission collaborator."""

    model_config = {"frozen": True}

    accepted: bool
    values: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)


@runtime_checkable
class SpeechToTextProvider(Protocol):
    """Continuous recognizer emitting growing transcripts per update."""

    def start(self, on_transcript: TranscriptCallback, on_error: ErrorCallback) -> None: ...

    def stop(self) -> None: ...


@runtime_checkable
class MicrophonePermissionGate(Protocol):
    async def request(self) -> bool:
        """Return True when microphone access is granted."""
        ...


@runtime_checkable
class FocusController(Protocol):
    def focus(self, field_id: str) -> None:
        """Move input focus to the control for *field_id*."""
        ...


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


@runtime_checkable
class FormSubmitter(Protocol):
    def submit(self, values: dict[str, str]) -> SubmissionReceipt:
        """Validate and accept (or reject) the final values snapshot."""
        ...


class NullNotificationSink:
    """Sink that drops every notification."""

    def notify(self, notification: Notification) -> None:
        return None


class NullFocusController:
    def focus(self, field_id: str) -> None:
        return None
