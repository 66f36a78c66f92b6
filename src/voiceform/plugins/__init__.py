"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``voiceform.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from voiceform.plugins.manager import PluginManager

__all__ = ["PluginManager"]
