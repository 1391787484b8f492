"""
Runtime-checkable protocols for earlyspring-core.
"""

from earlyspring_core.protocols.interfaces import PresentationPort

__all__ = [
    "PresentationPort",
]
