"""Command classifier — ordered regex patterns over a transcript.

Patterns are tried in priority order and the first one that matches wins,
even when a later pattern would also match. "enter john for name" is
therefore a set-field command targeting the phrase "john", not a value for
the name field. The order lives in :data:`DEFAULT_PATTERNS`.

Matching is case-insensitive. Field phrases are returned lower-cased;
values keep the speaker's casing ("set name to John Smith").
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from voiceform.domain.commands import (
    ClearAll,
    ClearField,
    Command,
    FocusField,
    NextField,
    PreviousField,
    SetField,
    StopListening,
    Submit,
    Unrecognized,
)

if TYPE_CHECKING:
    from voiceform.domain.fields import FieldRegistry

Builder = Callable[["re.Match[str]", "FieldRegistry | None"], "Command | None"]

SET_CONNECTORS = ("to", "with", "as", "for", "value")
_TRAILING_PUNCT = ".!?"


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _field_phrase(text: str) -> str:
    return " ".join(text.lower().split())


def _value_phrase(text: str) -> str:
    return text.strip().rstrip(_TRAILING_PUNCT).strip()


@dataclass(frozen=True)
class CommandPattern:
    """One classifier rule: a regex plus the builder for its command.

    A builder may return None to reject a regex hit; the pattern then
    tries the next hit in the transcript before giving up.
    """

    name: str
    regex: re.Pattern[str]
    build: Builder

    def match(self, transcript: str, registry: FieldRegistry | None = None) -> Command | None:
        for hit in self.regex.finditer(transcript):
            command = self.build(hit, registry)
            if command is not None:
                return command
        return None


# --- Builders ---

_SET_WITH_CONNECTOR = _compile(
    r"^(?P<field>[a-z][a-z\s]*?)\s+(?:" + "|".join(SET_CONNECTORS) + r")\s+(?P<value>\S.*)$"
)
_LEADING_CONNECTOR = _compile(r"^(?:" + "|".join(SET_CONNECTORS) + r")\b")


def _split_without_connector(rest: str, registry: FieldRegistry | None) -> tuple[str, str] | None:
    """Split "<alias> <value>" using the longest registered alias prefix."""
    if registry is None:
        return None
    words = rest.split()
    lowered = " ".join(words).lower()
    for alias in sorted(registry.aliases, key=len, reverse=True):
        if not lowered.startswith(alias + " "):
            continue
        value = " ".join(words[len(alias.split()) :])
        if not value or _LEADING_CONNECTOR.match(value):
            return None
        return alias, value
    return None


def _build_set_field(hit: re.Match[str], registry: FieldRegistry | None) -> Command | None:
    rest = hit.group("rest").strip()
    connected = _SET_WITH_CONNECTOR.match(rest)
    if connected is not None:
        field_ref, value = connected.group("field"), connected.group("value")
    else:
        split = _split_without_connector(rest, registry)
        if split is None:
            return None
        field_ref, value = split
    value = _value_phrase(value)
    if not value:
        return None
    return SetField(field_ref=_field_phrase(field_ref), raw_value=value)


def _build_enter_value(hit: re.Match[str], _registry: FieldRegistry | None) -> Command | None:
    value = _value_phrase(hit.group("value"))
    field_ref = _field_phrase(hit.group("field"))
    if not value or not field_ref:
        return None
    return SetField(field_ref=field_ref, raw_value=value)


def _build_clear_field(hit: re.Match[str], _registry: FieldRegistry | None) -> Command | None:
    field_ref = _field_phrase(hit.group("field"))
    return ClearField(field_ref=field_ref) if field_ref else None


def _build_focus_field(hit: re.Match[str], _registry: FieldRegistry | None) -> Command | None:
    field_ref = _field_phrase(hit.group("field"))
    return FocusField(field_ref=field_ref) if field_ref else None


def _constant(command: Command) -> Builder:
    def build(_hit: re.Match[str], _registry: FieldRegistry | None) -> Command:
        return command

    return build


# --- Priority order ---

DEFAULT_PATTERNS: tuple[CommandPattern, ...] = (
    CommandPattern(
        name="set_field",
        regex=_compile(r"\b(?:set|fill|enter|put|input)\s+(?:the\s+)?(?P<rest>\S.*)"),
        build=_build_set_field,
    ),
    CommandPattern(
        name="enter_value",
        regex=_compile(
            r"\b(?:enter|put|input|set)\s+(?P<value>\S.*?)\s+(?:for|into|in|as)\s+"
            r"(?:the\s+)?(?P<field>[a-z][a-z\s]*)"
        ),
        build=_build_enter_value,
    ),
    CommandPattern(
        name="clear_field",
        regex=_compile(
            r"\bclear\s+(?!(?:the\s+)?(?:all|everything|form)\b)(?:the\s+)?(?P<field>[a-z][a-z\s]*)"
        ),
        build=_build_clear_field,
    ),
    CommandPattern(
        name="clear_all",
        regex=_compile(r"\bclear\s+(?:the\s+)?(?:all|everything|form)\b"),
        build=_constant(ClearAll()),
    ),
    CommandPattern(
        name="focus_field",
        regex=_compile(
            r"\b(?:go\s+to|focus\s+(?:on|to)|jump\s+to)\s+(?:the\s+)?(?P<field>[a-z][a-z\s]*)"
        ),
        build=_build_focus_field,
    ),
    CommandPattern(
        name="next_field",
        regex=_compile(r"\bnext\s+(?:field|input|box)\b"),
        build=_constant(NextField()),
    ),
    CommandPattern(
        name="previous_field",
        regex=_compile(r"\b(?:previous|prev|last|back)\s+(?:field|input|box)\b"),
        build=_constant(PreviousField()),
    ),
    CommandPattern(
        name="submit",
        regex=_compile(r"\b(?:submit|send|complete)\s+(?:the\s+)?(?:form|data)\b"),
        build=_constant(Submit()),
    ),
    CommandPattern(
        name="stop_listening",
        regex=_compile(r"\b(?:stop|end|finish|turn\s+off)\s+(?:listening|recording|voice)\b"),
        build=_constant(StopListening()),
    ),
)


class CommandClassifier:
    """Classify transcripts against an ordered pattern list.

    Usage::

        classifier = CommandClassifier(registry=FieldRegistry.default())
        command = classifier.classify("set name to John Smith")
        # SetField(field_ref="name", raw_value="John Smith")

    The registry is optional; with one attached, "set <alias> <value>"
    without a connector word is also understood.
    """

    def __init__(
        self,
        patterns: Sequence[CommandPattern] = DEFAULT_PATTERNS,
        *,
        registry: FieldRegistry | None = None,
    ) -> None:
        self._patterns = tuple(patterns)
        self._registry = registry

    @property
    def patterns(self) -> tuple[CommandPattern, ...]:
        """Patterns in priority order."""
        return self._patterns

    def classify(self, transcript: str) -> Command:
        text = transcript.strip()
        for pattern in self._patterns:
            command = pattern.match(text, self._registry)
            if command is not None:
                return command
        return Unrecognized(raw_transcript=transcript)

    def match_name(self, transcript: str) -> str | None:
        """Name of the first pattern that matches *transcript*, if any."""
        text = transcript.strip()
        for pattern in self._patterns:
            if pattern.match(text, self._registry) is not None:
                return pattern.name
        return None
