"""BaseService — shared plumbing for voiceform services.

Services receive an optional :class:`PluginManager`; lifecycle events are
dispatched synchronously through its hook relay.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from voiceform.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class VoiceFormService(BaseService):
            def set_field(self, ...) -> ServiceResult:
                ...
                self._dispatch_event("post_field_set", {...}, warnings)
    """

    def __init__(self, plugins: PluginManager | None = None) -> None:
        self._plugins = plugins

    @property
    def plugins(self) -> PluginManager | None:
        return self._plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        hook_fn = getattr(self._plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
