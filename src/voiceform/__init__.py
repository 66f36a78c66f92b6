"""voiceform — voice-command interpreter for a tax-filing form."""

__version__ = "0.1.0"
