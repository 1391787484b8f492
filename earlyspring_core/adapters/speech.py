"""
Speech adapters.
"""

from earlyspring_core.interfaces.effects import SpeechPort
from earlyspring_core.utils.logging import get_logger, log_error

logger = get_logger(__name__)


class FallbackSpeechPort(SpeechPort):
    """
    Speak with a preferred synthesizer, falling back to another on failure.

    Typically a cloud voice in front of the platform's built-in voice.

    Example:
        >>> speech = FallbackSpeechPort(CloudVoice(api_key), DeviceVoice())
        >>> await speech.speak("Time to wake up!")
    """

    def __init__(self, primary: SpeechPort, fallback: SpeechPort):
        """
        Initialize fallback speech.

        Args:
            primary: Preferred synthesizer
            fallback: Synthesizer used when the primary fails
        """
        self.primary = primary
        self.fallback = fallback

    async def speak(self, text: str) -> None:
        """
        Speak text with the primary synthesizer, else the fallback.

        Raises:
            SpeechError: If the fallback fails too
        """
        try:
            await self.primary.speak(text)
            return
        except Exception as e:
            logger.warning("primary_speech_failed", **log_error(e))

        await self.fallback.speak(text)

    def cancel(self) -> None:
        """Stop both synthesizers."""
        self.primary.cancel()
        self.fallback.cancel()
