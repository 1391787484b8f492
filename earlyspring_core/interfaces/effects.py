"""
Effect Interfaces - Vibration and speech contracts.

Both are capability-checked ports: the engine calls them unconditionally and
the implementation decides whether the platform supports the capability.
"""

from abc import ABC, abstractmethod
from typing import List


class VibrationPort(ABC):
    """
    Abstract interface for device vibration.

    Example:
        >>> vibration.vibrate([500, 250, 500, 250, 500])
    """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether the platform can vibrate.

        Returns:
            True if vibration is supported
        """
        pass

    @abstractmethod
    def vibrate(self, pattern: List[int]) -> None:
        """
        Start a vibration pattern.

        The pattern repeats until cancel() is called; one call keeps the
        motor going for as long as the alarm rings.

        Args:
            pattern: Milliseconds on/off, alternating, starting with "on"
        """
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop any running vibration."""
        pass


class SpeechPort(ABC):
    """
    Abstract interface for text-to-speech.

    Example:
        >>> await speech.speak("Morning run. Time to wake up!")
    """

    @abstractmethod
    async def speak(self, text: str) -> None:
        """
        Speak text, returning when speech finishes.

        Args:
            text: Text to speak

        Raises:
            SpeechError: If synthesis or playback fails
        """
        pass

    def cancel(self) -> None:
        """Stop speaking. Default implementation does nothing."""
        pass
