"""
Runtime-checkable protocols for earlyspring-core.

Protocols provide structural subtyping (duck typing) with type safety. The
presentation port is a protocol rather than an ABC so that a plain function
can be registered as the ringing-screen callback.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from earlyspring_core.models.alarm import AlarmDefinition

if TYPE_CHECKING:
    from earlyspring_core.trigger.audio import RingingAudio


@runtime_checkable
class PresentationPort(Protocol):
    """
    Ringing UI callback.

    Invoked synchronously when an alarm fires, before any slower trigger step
    starts, with the alarm and its live audio handle. The engine never renders.
    """

    def __call__(self, alarm: AlarmDefinition, audio: Optional["RingingAudio"]) -> None:
        """Show the ringing screen for ``alarm``."""
        ...

