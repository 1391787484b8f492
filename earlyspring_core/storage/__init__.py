"""
Local storage.

Modules:
    state: LocalStateStore - namespaced JSON key-value store
    local: LocalAlarmStore - alarm repository and habit score service
"""

from earlyspring_core.storage.local import LocalAlarmStore
from earlyspring_core.storage.state import LocalStateStore

__all__ = ["LocalAlarmStore", "LocalStateStore"]
