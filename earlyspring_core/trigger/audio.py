"""
Ringing audio.

The live audio handle of a ringing session: resolves a playable sound
through a fallback chain and ramps the volume for gradual alarms.
"""

import asyncio
from typing import List, Optional

from earlyspring_core.interfaces.audio import AudioPort, AudioSource
from earlyspring_core.models.config import AudioConfig
from earlyspring_core.utils.logging import get_logger, log_error
from earlyspring_core.utils.validation import validate_volume

logger = get_logger(__name__)

SYNTHESIZED_TONE = "synthesized_tone"


class RingingAudio:
    """
    Live audio handle handed to the presentation port.

    The handle exists before any sound is loaded so that the ringing screen
    can be shown immediately; ``start()`` then resolves the sound (requested
    sound, then the default sound, then a synthesized tone) and loops it.

    Attributes:
        volume: Current amplitude
        resolved_sound: Sound id actually playing, or None
        source: Playing audio source, or None

    Example:
        >>> audio = RingingAudio(port, "birds", AudioConfig(), gradual=True)
        >>> await audio.start()
        >>> audio.stop()
    """

    def __init__(
        self,
        port: AudioPort,
        sound: Optional[str],
        config: AudioConfig,
        gradual: bool = False,
    ):
        """
        Initialize ringing audio.

        Args:
            port: Platform audio backend
            sound: Requested sound id (None for the default sound)
            config: Audio configuration
            gradual: Ramp volume from ``initial_volume`` to 1.0
        """
        self._port = port
        self._config = config
        self.gradual = gradual
        self.volume = config.initial_volume if gradual else 1.0
        self.source: Optional[AudioSource] = None
        self.resolved_sound: Optional[str] = None
        self._stopped = False

        self.candidates: List[str] = []
        for sound_id in (sound, config.default_sound):
            if sound_id and sound_id not in self.candidates:
                self.candidates.append(sound_id)

    @property
    def is_playing(self) -> bool:
        """True while a source is looping."""
        return self.source is not None and not self._stopped

    @property
    def stopped(self) -> bool:
        """True once stop() was called."""
        return self._stopped

    async def start(self) -> None:
        """Resolve a sound, start looping it, then run the volume ramp."""
        source = await self._resolve()
        if source is None:
            return

        if self.gradual:
            await self._ramp()

    def stop(self) -> None:
        """Stop playback. Safe to call repeatedly and before start()."""
        self._stopped = True
        if self.source is not None:
            try:
                self.source.stop()
            except Exception as e:
                logger.warning("audio_stop_failed", **log_error(e))
        logger.debug("ringing_audio_stopped", sound=self.resolved_sound)

    def set_volume(self, volume: float) -> None:
        """Set the amplitude of the playing source."""
        self.volume = validate_volume(volume)
        if self.source is not None:
            self.source.set_volume(self.volume)

    async def _resolve(self) -> Optional[AudioSource]:
        for sound_id in self.candidates:
            source = await self._try_play(sound_id, self._port.load(sound_id))
            if source is not None or self._stopped:
                return source

        source = await self._try_play(SYNTHESIZED_TONE, self._port.synthesize_tone())
        if source is None and not self._stopped:
            logger.error("alarm_audio_unavailable", candidates=self.candidates)
        return source

    async def _try_play(self, sound_id: str, loading) -> Optional[AudioSource]:
        try:
            source = await loading
            if self._stopped:
                return None
            source.set_volume(self.volume)
            await source.play(loop=True)
        except Exception as e:
            logger.warning("alarm_sound_failed", sound=sound_id, **log_error(e))
            return None

        if self._stopped:
            # Dismissed while playback was starting
            source.stop()
            return None

        self.source = source
        self.resolved_sound = sound_id
        logger.info("alarm_sound_playing", sound=sound_id, volume=self.volume)
        return source

    async def _ramp(self) -> None:
        while not self._stopped and self.volume < 1.0:
            await asyncio.sleep(self._config.volume_step_seconds)
            if self._stopped:
                break
            self.set_volume(round(min(1.0, self.volume + self._config.volume_step), 2))
            logger.debug("alarm_volume_raised", volume=self.volume)
