"""
Audio Interface - Alarm sound playback contract.

Defines the contract for platform audio backends.
"""

from abc import ABC, abstractmethod


class AudioSource(ABC):
    """
    A loaded, playable sound.

    Example:
        >>> source = await audio_port.load("birds")
        >>> source.set_volume(0.1)
        >>> await source.play(loop=True)
    """

    @abstractmethod
    async def play(self, loop: bool = True) -> None:
        """
        Start playback.

        Args:
            loop: Repeat until stopped

        Raises:
            AudioError: If playback cannot start (decode failure, device busy...)
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop playback and rewind. Safe to call when not playing."""
        pass

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """
        Set amplitude.

        Args:
            volume: Amplitude in [0.0, 1.0]
        """
        pass


class AudioPort(ABC):
    """
    Abstract interface for audio backends.

    Example:
        >>> class SoundDeviceAudio(AudioPort):
        ...     async def load(self, sound_id):
        ...         # Decode /sounds/<sound_id>.mp3
        ...         pass
    """

    @abstractmethod
    async def load(self, sound_id: str) -> AudioSource:
        """
        Load a named alarm sound.

        Args:
            sound_id: Sound identifier, e.g. "baby_waltz"

        Returns:
            Playable source

        Raises:
            AudioError: If the sound cannot be found or decoded
        """
        pass

    @abstractmethod
    async def synthesize_tone(self) -> AudioSource:
        """
        Build a synthesized beep tone, used when no sound file loads.

        Raises:
            AudioError: If the platform cannot produce audio at all
        """
        pass
