"""Parsed voice commands and the user-facing command catalog.

A command is built fresh for each transcript and consumed immediately by
the form session; nothing retains it.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class _CommandBase(BaseModel):
    model_config = {"frozen": True}


class SetField(_CommandBase):
    """Store a (normalized) value in the referenced field."""

    kind: Literal["set_field"] = "set_field"
    field_ref: str
    raw_value: str


class ClearField(_CommandBase):
    """Reset the referenced field to the empty string."""

    kind: Literal["clear_field"] = "clear_field"
    field_ref: str


class ClearAll(_CommandBase):
    kind: Literal["clear_all"] = "clear_all"


class FocusField(_CommandBase):
    """Move focus to the referenced field."""

    kind: Literal["focus_field"] = "focus_field"
    field_ref: str


class NextField(_CommandBase):
    kind: Literal["next_field"] = "next_field"


class PreviousField(_CommandBase):
    kind: Literal["previous_field"] = "previous_field"


class Submit(_CommandBase):
    kind: Literal["submit"] = "submit"


class StopListening(_CommandBase):
    kind: Literal["stop_listening"] = "stop_listening"


class Unrecognized(_CommandBase):
    """Transcript that matched no command pattern."""

    kind: Literal["unrecognized"] = "unrecognized"
    raw_transcript: str


Command = Annotated[
    SetField
    | ClearField
    | ClearAll
    | FocusField
    | NextField
    | PreviousField
    | Submit
    | StopListening
    | Unrecognized,
    Field(discriminator="kind"),
]


class CommandHelp(BaseModel):
    """One entry of the spoken-command help panel."""

    model_config = {"frozen": True}

    command: str
    description: str
    example: str
    kind: str


COMMAND_HELP: tuple[CommandHelp, ...] = (
    CommandHelp(
        command="Set [field] to [value]",
        description="Sets a specific field to the given value",
        example="Set name to John Smith",
        kind="set_field",
    ),
    CommandHelp(
        command="Fill [field] with [value]",
        description="Alternative way to fill a field",
        example="Fill email with john@example.com",
        kind="set_field",
    ),
    CommandHelp(
        command="Enter [value] for [field]",
        description="Another way to specify field and value",
        example="Enter 50000 for annual income",
        kind="set_field",
    ),
    CommandHelp(
        command="Clear [field]",
        description="Clears the specified field",
        example="Clear email",
        kind="clear_field",
    ),
    CommandHelp(
        command="Clear all",
        description="Resets the entire form",
        example="Clear all",
        kind="clear_all",
    ),
    CommandHelp(
        command="Next field",
        description="Moves focus to the next field",
        example="Next field",
        kind="next_field",
    ),
    CommandHelp(
        command="Previous field",
        description="Moves focus to the previous field",
        example="Previous field",
        kind="previous_field",
    ),
    CommandHelp(
        command="Focus on [field]",
        description="Jumps to a specific field",
        example="Focus on date of birth",
        kind="focus_field",
    ),
    CommandHelp(
        command="Submit form",
        description="Submits the completed form",
        example="Submit form",
        kind="submit",
    ),
    CommandHelp(
        command="Stop listening",
        description="Turns off voice recognition",
        example="Stop listening",
        kind="stop_listening",
    ),
)
