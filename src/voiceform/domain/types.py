"""Field kinds and session state enums."""

from __future__ import annotations

from enum import StrEnum


class FieldKind(StrEnum):
    """Value kinds that select a normalization rule."""

    FREE_TEXT = "free-text"
    EMAIL = "email"
    SSN = "ssn"
    DATE = "date"
    CURRENCY = "currency"
    ENUMERATION = "enumeration"
    INTEGER_COUNT = "integer-count"


class ListeningState(StrEnum):
    """Whether voice input is currently accepted."""

    IDLE = "idle"
    LISTENING = "listening"


class NotificationVariant(StrEnum):
    """Presentation hint for user-facing status messages."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
