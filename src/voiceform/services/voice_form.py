"""VoiceFormService — the form session state machine.

States are Idle and Listening; independently the session tracks which
field (if any) has focus. Transcripts are processed one at a time to
completion, so no locking is involved. The only asynchronous step is the
microphone permission request inside :meth:`start_listening`.

Every operation returns a ServiceResult and sends a Notification to the
sink. Failures (unknown field, unrecognized transcript, denied
microphone) are results, never exceptions: nothing here ends a session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from voiceform.config.logging import transcript_context
from voiceform.domain.classifier import CommandClassifier
from voiceform.domain.commands import Command
from voiceform.domain.fields import FieldNotFound, FieldRegistry
from voiceform.domain.normalize import normalize
from voiceform.domain.session import FormSession
from voiceform.domain.types import ListeningState, NotificationVariant
from voiceform.services.base import BaseService
from voiceform.services.collaborators import (
    PERMISSION_DENIED_ERROR,
    FocusController,
    FormSubmitter,
    MicrophonePermissionGate,
    Notification,
    NotificationSink,
    NullFocusController,
    NullNotificationSink,
    SpeechToTextProvider,
)
from voiceform.services.result import ServiceResult
from voiceform.services.submission import ValidatingSubmitter
from voiceform.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from voiceform.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
UNRECOGNIZED = "UNRECOGNIZED"
PERMISSION_DENIED = "PERMISSION_DENIED"
SPEECH_UNSUPPORTED = "SPEECH_UNSUPPORTED"
SUBMISSION_REJECTED = "SUBMISSION_REJECTED"
RECOGNITION_ERROR = "RECOGNITION_ERROR"
NOT_LISTENING = "NOT_LISTENING"

END_OF_FORM = "Already at the last field"
BEGINNING_OF_FORM = "Already at the first field"
NO_FIELD_SELECTED = "Please select a field first"


class VoiceFormService(BaseService):
    """Apply voice commands to an in-memory form session.

    Usage::

        svc = VoiceFormService(FieldRegistry.default(), speech=provider)
        await svc.start_listening()
        svc.handle_transcript("set name to Jane Doe")
        svc.session.values["fullName"]  # "Jane Doe"
    """

    def __init__(
        self,
        registry: FieldRegistry | None = None,
        *,
        speech: SpeechToTextProvider | None = None,
        permission: MicrophonePermissionGate | None = None,
        focus: FocusController | None = None,
        notifier: NotificationSink | None = None,
        submitter: FormSubmitter | None = None,
        classifier: CommandClassifier | None = None,
        plugins: PluginManager | None = None,
        notify_unrecognized: bool = False,
    ) -> None:
        super().__init__(plugins)
        self._registry = registry or FieldRegistry.default()
        self._speech = speech
        self._permission = permission
        self._focus = focus or NullFocusController()
        self._notifier = notifier or NullNotificationSink()
        self._submitter = submitter or ValidatingSubmitter()
        self._classifier = classifier or CommandClassifier(registry=self._registry)
        self._notify_unrecognized = notify_unrecognized
        self._session = FormSession(self._registry)
        self._handlers: dict[str, Callable[[Any], ServiceResult]] = {
            "set_field": lambda c: self.set_field(c.field_ref, c.raw_value),
            "clear_field": lambda c: self.clear_field(c.field_ref),
            "clear_all": lambda _c: self.clear_all(),
            "focus_field": lambda c: self.focus_field(c.field_ref),
            "next_field": lambda _c: self.next_field(),
            "previous_field": lambda _c: self.previous_field(),
            "submit": lambda _c: self.submit(),
            "stop_listening": lambda _c: self.stop_listening(),
            "unrecognized": lambda c: self.unrecognized(c.raw_transcript),
        }

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    @property
    def session(self) -> FormSession:
        return self._session

    @property
    def values(self) -> dict[str, str]:
        """Snapshot of the current field values."""
        return self._session.snapshot()

    @property
    def is_listening(self) -> bool:
        return self._session.is_listening

    # ------------------------------------------------------------------
    # Listening lifecycle
    # ------------------------------------------------------------------

    async def start_listening(self) -> ServiceResult:
        """Idle -> Listening, after the microphone permission check.

        A denied permission leaves the session Idle. There is no retry;
        callers invoke this again.
        """
        op = "start_listening"
        if self._session.is_listening:
            return self._ok(op, warnings=["Already listening"])

        if self._speech is None:
            self._notify(
                "Voice input unavailable",
                "Speech recognition is not supported in this environment.",
                NotificationVariant.DESTRUCTIVE,
            )
            return ServiceResult.failure(
                op, SPEECH_UNSUPPORTED, "Speech recognition is not available"
            )

        granted = True
        if self._permission is not None:
            try:
                granted = await self._permission.request()
            except Exception:
                logger.warning("Microphone permission request failed", exc_info=True)
                granted = False
        if not granted:
            logger.info("Microphone permission denied")
            return self._permission_denied(op)

        # Listening before start(): providers may deliver results synchronously.
        self._session.state = ListeningState.LISTENING
        try:
            self._speech.start(self.handle_transcript, self.handle_recognition_error)
        except Exception as exc:
            self._session.state = ListeningState.IDLE
            logger.warning("Speech recognition failed to start", exc_info=True)
            self._notify(
                "Voice input unavailable",
                "Speech recognition could not be started.",
                NotificationVariant.DESTRUCTIVE,
            )
            return ServiceResult.failure(
                op,
                RECOGNITION_ERROR,
                f"Speech recognition failed to start: {exc}",
                data=self._state(),
            )
        logger.debug("Listening started")

        warnings: list[str] = []
        self._dispatch_event("post_listening_change", {"listening": True}, warnings)
        self._notify(
            "Voice commands activated",
            "You can now control the form with your voice.",
        )
        return self._ok(op, warnings=warnings)

    @traced
    def stop_listening(self) -> ServiceResult:
        """Listening -> Idle. Immediate; a no-op when already Idle."""
        op = "stop_listening"
        if not self._session.is_listening:
            return self._ok(op, warnings=["Not listening"])
        warnings: list[str] = []
        self._halt_listening(warnings)
        return self._ok(op, warnings=warnings)

    def _halt_listening(self, warnings: list[str]) -> None:
        self._session.state = ListeningState.IDLE
        if self._speech is not None:
            self._speech.stop()
        logger.debug("Listening stopped")
        self._dispatch_event("post_listening_change", {"listening": False}, warnings)
        self._notify("Voice commands deactivated", "Voice control has been turned off.")

    # ------------------------------------------------------------------
    # Recognition events
    # ------------------------------------------------------------------

    @traced
    def handle_transcript(self, transcript: str) -> ServiceResult:
        """Classify one transcript update and apply the resulting command.

        Transcripts that arrive while Idle are ignored.
        """
        if not self._session.is_listening:
            return ServiceResult.failure(
                "handle_transcript",
                NOT_LISTENING,
                "Voice input is not active",
                transcript=transcript,
            )
        self._session.transcript = transcript
        with trace_span("classify") as span:
            command = self._classifier.classify(transcript)
            if span:
                span.annotate("command", command.kind)
        with transcript_context(transcript, command=command.kind):
            return self.apply(command)

    @traced
    def handle_recognition_error(self, error: str) -> ServiceResult:
        """React to an error reported by the speech provider."""
        op = "recognition_error"
        if error == PERMISSION_DENIED_ERROR:
            if self._session.is_listening:
                self._halt_listening([])
            return self._permission_denied(op)
        logger.warning("Speech recognition error: %s", error)
        return ServiceResult.failure(
            op, RECOGNITION_ERROR, f"Speech recognition error: {error}", recognizer_error=error
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def apply(self, command: Command) -> ServiceResult:
        """Apply a classified command to the session."""
        logger.debug("Applying %s", command.kind)
        return self._handlers[command.kind](command)

    def apply_transcript(self, transcript: str) -> ServiceResult:
        """Classify and apply regardless of listening state (typed input)."""
        self._session.transcript = transcript
        return self.apply(self._classifier.classify(transcript))

    @traced
    def set_field(self, field_ref: str, raw_value: str) -> ServiceResult:
        """Resolve *field_ref*, normalize *raw_value*, store it. Focus is untouched."""
        op = "set_field"
        try:
            field_id = self._registry.resolve(field_ref)
        except FieldNotFound:
            return self._field_not_found(op, field_ref)

        desc = self._registry.describe(field_id)
        with trace_span("normalize") as span:
            value = normalize(desc.kind, raw_value)
            if span:
                span.annotate("kind", str(desc.kind))
        self._session.set_value(field_id, value)

        warnings: list[str] = []
        self._dispatch_event(
            "post_field_set",
            {"field_id": field_id, "value": value, "raw_value": raw_value},
            warnings,
        )
        self._notify("Field updated", f'Set {field_ref} to "{value}"')
        return self._ok(
            op,
            warnings=warnings,
            field_id=field_id,
            field_ref=field_ref,
            value=value,
            raw_value=raw_value,
        )

    @traced
    def clear_field(self, field_ref: str) -> ServiceResult:
        op = "clear_field"
        try:
            field_id = self._registry.resolve(field_ref)
        except FieldNotFound:
            return self._field_not_found(op, field_ref)

        self._session.set_value(field_id, "")
        warnings: list[str] = []
        self._dispatch_event("post_field_clear", {"field_id": field_id}, warnings)
        self._notify("Field cleared", f"Cleared {field_ref}")
        return self._ok(op, warnings=warnings, field_id=field_id, field_ref=field_ref)

    @traced
    def clear_all(self) -> ServiceResult:
        """Blank every field. Focus and listening state are kept."""
        op = "clear_all"
        self._session.clear_values()
        warnings: list[str] = []
        self._dispatch_event("post_form_clear", {}, warnings)
        self._notify("Form cleared", "All fields have been reset.")
        return self._ok(op, warnings=warnings, cleared=len(self._session.values))

    @traced
    def focus_field(self, field_ref: str) -> ServiceResult:
        op = "focus_field"
        try:
            field_id = self._registry.resolve(field_ref)
        except FieldNotFound:
            return self._field_not_found(op, field_ref)

        warnings = self._move_focus(field_id)
        self._notify("Field focused", f"Now focusing on {field_ref}")
        return self._ok(op, warnings=warnings, field_id=field_id, field_ref=field_ref)

    @traced
    def next_field(self) -> ServiceResult:
        """Focus the next field; the first one when nothing has focus."""
        op = "next_field"
        order = self._registry.canonical_order()
        index = self._session.focus_index

        if index is None and order:
            target = order[0]
        elif index is not None and index < len(order) - 1:
            target = order[index + 1]
        else:
            self._notify("End of form", END_OF_FORM)
            return self._ok(op, warnings=[END_OF_FORM], boundary="end")

        warnings = self._move_focus(target)
        self._notify("Moved to next field", f"Now focusing on {self._label(target)}")
        return self._ok(op, warnings=warnings, field_id=target)

    @traced
    def previous_field(self) -> ServiceResult:
        """Focus the previous field. No-op at the first field or with no focus."""
        op = "previous_field"
        index = self._session.focus_index

        if index is None:
            self._notify("No field selected", NO_FIELD_SELECTED)
            return self._ok(op, warnings=[NO_FIELD_SELECTED], boundary="start")
        if index == 0:
            self._notify("Beginning of form", BEGINNING_OF_FORM)
            return self._ok(op, warnings=[BEGINNING_OF_FORM], boundary="start")

        target = self._registry.canonical_order()[index - 1]
        warnings = self._move_focus(target)
        self._notify("Moved to previous field", f"Now focusing on {self._label(target)}")
        return self._ok(op, warnings=warnings, field_id=target)

    @traced
    def submit(self) -> ServiceResult:
        """Hand the values snapshot to the submitter, then stop listening."""
        op = "submit"
        snapshot = self._session.snapshot()
        with trace_span("submitter") as span:
            receipt = self._submitter.submit(snapshot)
            if span:
                span.annotate("accepted", receipt.accepted)

        warnings: list[str] = []
        self._dispatch_event(
            "post_submit", {"values": snapshot, "accepted": receipt.accepted}, warnings
        )
        if self._session.is_listening:
            self._halt_listening(warnings)

        if not receipt.accepted:
            self._notify(
                "Form has errors",
                "; ".join(receipt.errors.values()) or "The form could not be submitted.",
                NotificationVariant.DESTRUCTIVE,
            )
            result = ServiceResult.failure(
                op,
                SUBMISSION_REJECTED,
                "Submission failed validation",
                data=self._state(values=snapshot),
                errors=receipt.errors,
            )
            return result.model_copy(update={"warnings": warnings})

        self._notify("Form Submitted", "Your information has been successfully submitted.")
        return self._ok(op, warnings=warnings, values=snapshot)

    def unrecognized(self, transcript: str) -> ServiceResult:
        """Report a transcript that matched no command. State is unchanged."""
        logger.debug("Unrecognized transcript: %r", transcript)
        if self._notify_unrecognized:
            self._notify("Command not recognized", f'"{transcript}"')
        return ServiceResult.failure(
            "unrecognized",
            UNRECOGNIZED,
            "No command matched the transcript",
            transcript=transcript,
        )

    # ------------------------------------------------------------------
    # UI events
    # ------------------------------------------------------------------

    @traced
    def focus_field_by_id(self, field_id: str) -> ServiceResult:
        """Record focus that the user moved in the UI (no focus call back)."""
        op = "focus_changed"
        if field_id not in self._registry:
            return ServiceResult.failure(
                op, FIELD_NOT_FOUND, f"Unknown field id {field_id!r}", field_id=field_id
            )
        self._session.focus(field_id)
        return self._ok(op, field_id=field_id)

    @traced
    def reset(self) -> ServiceResult:
        """Discard the session (leaving the feature)."""
        op = "reset"
        warnings: list[str] = []
        if self._session.is_listening:
            self._halt_listening(warnings)
        self._session.reset()
        return self._ok(op, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _move_focus(self, field_id: str) -> list[str]:
        self._session.focus(field_id)
        warnings: list[str] = []
        try:
            self._focus.focus(field_id)
        except Exception:
            logger.warning("Focus controller failed for %s", field_id, exc_info=True)
            warnings.append(f"Could not move input focus to {field_id}")
        self._dispatch_event("post_focus", {"field_id": field_id}, warnings)
        return warnings

    def _label(self, field_id: str) -> str:
        return self._registry.describe(field_id).label

    def _notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> None:
        try:
            self._notifier.notify(
                Notification(title=title, description=description, variant=variant)
            )
        except Exception:
            logger.warning("Notification sink failed: %s", title, exc_info=True)

    def _state(self, **data: Any) -> dict[str, Any]:
        return {
            **data,
            "focused_field": self._session.focused_field,
            "listening": self._session.is_listening,
        }

    def _ok(self, op: str, *, warnings: list[str] | None = None, **data: Any) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=self._state(**data), warnings=warnings or [])

    def _field_not_found(self, op: str, field_ref: str) -> ServiceResult:
        logger.debug("No field matches %r", field_ref)
        self._notify(
            "Field not recognized",
            f'Could not find a field matching "{field_ref}"',
            NotificationVariant.DESTRUCTIVE,
        )
        return ServiceResult.failure(
            op,
            FIELD_NOT_FOUND,
            f'Could not find a field matching "{field_ref}"',
            data=self._state(field_ref=field_ref),
            field_ref=field_ref,
        )

    def _permission_denied(self, op: str) -> ServiceResult:
        self._notify(
            "Microphone access denied",
            "Please allow microphone access to use voice commands.",
            NotificationVariant.DESTRUCTIVE,
        )
        return ServiceResult.failure(
            op,
            PERMISSION_DENIED,
            "Microphone access denied",
            data=self._state(),
        )

