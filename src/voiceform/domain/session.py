"""FormSession — the in-progress form held in memory.

INVARIANT: ``values`` has an entry for every registered field id.
INVARIANT: ``focused_field`` is None or a registered field id.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from voiceform.domain.fields import FieldNotFound, FieldRegistry
from voiceform.domain.types import ListeningState


@dataclass
class FormSession:
    """Field values, focus, and listening flag for one form session."""

    registry: FieldRegistry
    values: dict[str, str] = field(default_factory=dict)
    focused_field: str | None = None
    state: ListeningState = ListeningState.IDLE
    transcript: str = ""

    def __post_init__(self) -> None:
        unknown = set(self.values) - set(self.registry.canonical_order())
        if unknown:
            raise FieldNotFound(sorted(unknown)[0])
        self.values = {
            field_id: self.values.get(field_id, "") for field_id in self.registry.canonical_order()
        }
        if self.focused_field is not None:
            self.registry.describe(self.focused_field)

    @property
    def is_listening(self) -> bool:
        return self.state is ListeningState.LISTENING

    @property
    def focus_index(self) -> int | None:
        """Position of the focused field in navigation order."""
        if self.focused_field is None:
            return None
        return self.registry.canonical_order().index(self.focused_field)

    def set_value(self, field_id: str, value: str) -> None:
        self.registry.describe(field_id)
        self.values[field_id] = value

    def clear_values(self) -> None:
        """Blank every field; focus and listening state are untouched."""
        for field_id in self.values:
            self.values[field_id] = ""

    def focus(self, field_id: str | None) -> None:
        if field_id is not None:
            self.registry.describe(field_id)
        self.focused_field = field_id

    def snapshot(self) -> dict[str, str]:
        """Copy of the values in navigation order."""
        return dict(self.values)

    def reset(self) -> None:
        """Return to a fresh session (leaving the feature)."""
        self.clear_values()
        self.focused_field = None
        self.state = ListeningState.IDLE
        self.transcript = ""
