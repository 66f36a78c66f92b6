"""structlog setup for voiceform sessions.

Log lines go to stderr so they never mix with command output on stdout:
console-rendered by default, JSON lines with ``--log-json``.

While a transcript is being handled, :func:`transcript_context` binds it
(and the command it classified to) so every line logged underneath, from
the normalizer to plugin hooks, says which utterance it belongs to.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

import structlog

# Dependencies that log at DEBUG/INFO on every hook call or event loop turn.
QUIET_LOGGERS: tuple[str, ...] = ("pluggy", "asyncio", "markdown_it")

# Transcripts can run long (continuous dictation); keep log lines readable.
MAX_TRANSCRIPT_CHARS = 60


def _clip_transcript(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    transcript = event_dict.get("transcript")
    if isinstance(transcript, str) and len(transcript) > MAX_TRANSCRIPT_CHARS:
        event_dict["transcript"] = transcript[: MAX_TRANSCRIPT_CHARS - 3] + "..."
    return event_dict


@contextmanager
def transcript_context(transcript: str, **extra: Any) -> Iterator[None]:
    """Bind *transcript* (and *extra*, e.g. ``command``) to log lines in the block."""
    with structlog.contextvars.bound_contextvars(transcript=transcript, **extra):
        yield


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib ``voiceform.*`` loggers to stderr.

    Args:
        verbose: DEBUG for ``voiceform`` (each classified command, focus
            move and span); WARNING+ otherwise.
        log_json: One JSON object per line instead of console rendering.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _clip_transcript,
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("voiceform").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
