"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, voiceform.toml only contains
overrides. A missing file means the built-in tax form as shipped.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RecognitionConfig(BaseModel):
    """[recognition] section — hints passed to the speech provider."""

    model_config = {"frozen": True}

    language: str = "en-US"
    continuous: bool = True
    interim_results: bool = True


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    notify_unrecognized: bool = False


class FormConfig(BaseModel):
    """[form] section.

    ``aliases`` maps a field id to extra spoken phrases, appended after the
    built-in aliases::

        [form.aliases]
        fullName = ["legal name"]
    """

    model_config = {"frozen": True}

    aliases: dict[str, list[str]] = Field(default_factory=dict)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True

