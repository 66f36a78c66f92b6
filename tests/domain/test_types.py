"""Tests for domain enums."""

from __future__ import annotations

from voiceform.domain.types import FieldKind, ListeningState, NotificationVariant


class TestFieldKind:
    def test_values(self) -> None:
        assert {k.value for k in FieldKind} == {
            "free-text",
            "email",
            "ssn",
            "date",
            "currency",
            "enumeration",
            "integer-count",
        }

    def test_str_enum_compares_to_str(self) -> None:
        assert FieldKind.CURRENCY == "currency"
        assert FieldKind("integer-count") is FieldKind.INTEGER_COUNT


class TestListeningState:
    def test_two_states(self) -> None:
        assert [s.value for s in ListeningState] == ["idle", "listening"]


class TestNotificationVariant:
    def test_values(self) -> None:
        assert NotificationVariant.DEFAULT == "default"
        assert NotificationVariant.DESTRUCTIVE == "destructive"
