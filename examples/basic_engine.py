"""
Basic Engine Example

Demonstrates an earlyspring-core engine with a local store, console
platform ports and an event subscriber.
"""

import asyncio
from datetime import datetime, timedelta

from earlyspring_core import AlarmEngine
from earlyspring_core.events import EventBus, EventType
from earlyspring_core.interfaces import AudioPort, AudioSource, SpeechPort
from earlyspring_core.models import AlarmDefinition, SnoozeConfig, Weekday
from earlyspring_core.storage import LocalAlarmStore
from earlyspring_core.utils import setup_logging


# Console audio for demo purposes
class ConsoleSource(AudioSource):
    """Prints instead of playing."""

    def __init__(self, sound_id: str):
        self.sound_id = sound_id

    async def play(self, loop: bool = True) -> None:
        print(f"🔔 Playing '{self.sound_id}' (loop={loop})")

    def stop(self) -> None:
        print(f"🔕 Stopped '{self.sound_id}'")

    def set_volume(self, volume: float) -> None:
        print(f"🔊 Volume {volume:.0%}")


class ConsoleAudio(AudioPort):
    async def load(self, sound_id: str) -> AudioSource:
        return ConsoleSource(sound_id)

    async def synthesize_tone(self) -> AudioSource:
        return ConsoleSource("tone")


class ConsoleSpeech(SpeechPort):
    async def speak(self, text: str) -> None:
        print(f"🗣️  {text}")

    def cancel(self) -> None:
        pass


def show_ringing_screen(alarm, audio):
    print(f"⏰ {alarm.display_label} is ringing! (snooze: {alarm.snooze.enabled})")


async def main():
    """Run the example."""
    setup_logging(level="WARNING")

    print("=" * 50)
    print("1️⃣  Storing alarms...")
    store = LocalAlarmStore(use_memory=True)
    soon = datetime.now() + timedelta(minutes=1)
    await store.save_alarm(
        AlarmDefinition(
            id="morning",
            user_id="demo-user",
            time=soon.strftime("%H:%M"),
            label="Morning run",
            days=list(Weekday),
            snooze=SnoozeConfig(minutes=5),
        )
    )

    print("\n2️⃣  Starting engine...")
    bus = EventBus(enable_history=True)
    bus.subscribe(EventType.HABIT_UPDATED, lambda e: print(f"🌱 Plant health {e.plant_health} (level {e.plant_level})"))

    engine = AlarmEngine(
        repository=store,
        habit_scores=store,
        audio=ConsoleAudio(),
        speech=ConsoleSpeech(),
        presentation=show_ringing_screen,
        event_bus=bus,
    )
    armed = await engine.start("demo-user")
    for occurrence in armed:
        print(f"   {occurrence.alarm.display_label}: {engine.registry.time_until(occurrence.alarm_id)}")

    print("\n3️⃣  Test trigger...")
    session = engine.test_trigger(armed[0].alarm)
    await asyncio.sleep(0.5)

    result = await engine.snooze(session)
    follow_up = result.snooze_occurrence
    print(f"   Snoozed until {follow_up.fire_at:%H:%M:%S} as '{follow_up.alarm.label}'")
    await bus.drain()

    print("\n4️⃣  Engine status:")
    health = engine.health_check()
    print(f"   Status: {health['status']}")
    print(f"   Pending alarms: {health['pending_alarms']}")

    print("\n5️⃣  Shutting down...")
    await engine.shutdown()
    print("✅ Cleanup complete!")


if __name__ == "__main__":
    asyncio.run(main())
