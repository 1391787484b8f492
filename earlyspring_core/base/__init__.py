"""
Base implementations for earlyspring-core.

Modules:
    engine: AlarmEngine - wires registry, trigger pipeline and lifecycle
"""

from earlyspring_core.base.engine import AlarmEngine

__all__ = [
    "AlarmEngine",
]
