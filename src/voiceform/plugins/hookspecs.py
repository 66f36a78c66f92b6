"""Pluggy hook specifications for form-session lifecycle events.

Six lifecycle events are dispatched synchronously after the session
state changes. One setup-time hook lets plugins add spoken aliases.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("voiceform")


class VoiceFormHookSpec:
    """Hook specifications for the voiceform plugin system."""

    @hookspec
    def post_field_set(self, field_id: str, value: str, raw_value: str) -> None:
        """Called after a field value is stored (already normalized)."""

    @hookspec
    def post_field_clear(self, field_id: str) -> None:
        """Called after a single field is cleared."""

    @hookspec
    def post_form_clear(self) -> None:
        """Called after every field is cleared."""

    @hookspec
    def post_focus(self, field_id: str) -> None:
        """Called after focus moves to a field."""

    @hookspec
    def post_submit(self, values: dict[str, str], accepted: bool) -> None:
        """Called after the submission collaborator answered."""

    @hookspec
    def post_listening_change(self, listening: bool) -> None:
        """Called when voice input starts or stops."""

    @hookspec
    def register_field_aliases(self) -> dict[str, list[str]] | None:
        """Return field id -> extra spoken aliases to merge into the registry."""
