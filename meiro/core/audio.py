"""Sound effects for game events.

The engine is an ordinary object owned by the game: it is created disabled,
``init()`` opens the output sink (typically on the first user interaction),
and ``suspend()``/``resume()`` follow the window's activity. Tones are
synthesized with numpy and pushed to a ``ToneSink``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100
FADE_FLOOR = 0.001


@dataclass(frozen=True)
class Tone:
    frequency: float
    duration: float
    volume: float
    ramp_to: Optional[float] = None
    ramp_time: float = 0.0


TONES: Dict[str, Tone] = {
    # short click
    "moved": Tone(frequency=440.0, duration=0.05, volume=0.3),
    # low thud
    "blocked": Tone(frequency=120.0, duration=0.1, volume=0.5),
    # rising fanfare
    "levelCompleted": Tone(frequency=660.0, duration=0.5, volume=0.4, ramp_to=880.0, ramp_time=0.2),
}


def synthesize(tone: Tone, sample_rate: int = DEFAULT_SAMPLE_RATE, master_volume: float = 1.0) -> np.ndarray:
    """Render *tone* as mono float32 samples in [-1, 1]."""
    count = max(1, int(round(tone.duration * sample_rate)))
    t = np.arange(count, dtype=np.float64) / sample_rate

    freq = np.full(count, tone.frequency, dtype=np.float64)
    if tone.ramp_to is not None and tone.ramp_time > 0:
        progress = np.clip(t / tone.ramp_time, 0.0, 1.0)
        freq = tone.frequency + (tone.ramp_to - tone.frequency) * progress
    phase = 2.0 * np.pi * np.cumsum(freq) / sample_rate

    # exponential fade from the tone's volume down to FADE_FLOOR
    start = max(tone.volume, FADE_FLOOR)
    envelope = start * (FADE_FLOOR / start) ** (t / tone.duration)
    samples = np.sin(phase) * envelope * max(0.0, min(1.0, master_volume))
    return samples.astype(np.float32)


class ToneSink(Protocol):
    def write(self, samples: np.ndarray, sample_rate: int) -> None: ...

    def suspend(self) -> None: ...

    def resume(self) -> None: ...

    def close(self) -> None: ...


class AudioState(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    SUSPENDED = "suspended"
    UNAVAILABLE = "unavailable"


class AudioEngine:
    def __init__(
        self,
        sink_factory: Callable[[int], ToneSink],
        volume: float = 0.5,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        self._sink_factory = sink_factory
        self._sink: Optional[ToneSink] = None
        self._sample_rate = sample_rate
        self._volume = max(0.0, min(1.0, float(volume)))
        self._state = AudioState.UNINITIALIZED

    @property
    def state(self) -> AudioState:
        return self._state

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, float(volume)))

    def init(self) -> bool:
        """Open the output sink. Safe to call repeatedly; resumes a suspended engine."""
        if self._state is AudioState.RUNNING:
            return True
        if self._state is AudioState.SUSPENDED:
            self.resume()
            return True
        if self._state is AudioState.UNAVAILABLE:
            return False
        try:
            self._sink = self._sink_factory(self._sample_rate)
        except Exception as e:
            logger.warning("Audio output is not available: %s", e)
            self._state = AudioState.UNAVAILABLE
            return False
        self._state = AudioState.RUNNING
        return True

    def suspend(self) -> None:
        if self._state is AudioState.RUNNING and self._sink is not None:
            self._sink.suspend()
            self._state = AudioState.SUSPENDED

    def resume(self) -> None:
        if self._state is AudioState.SUSPENDED and self._sink is not None:
            self._sink.resume()
            self._state = AudioState.RUNNING

    def close(self) -> None:
        if self._sink is not None:
            self._sink.close()
            self._sink = None
        self._state = AudioState.UNINITIALIZED

    def play(self, name: str) -> bool:
        """Play the tone for an event name. Returns False when nothing was played."""
        if self._state is not AudioState.RUNNING or self._sink is None:
            return False
        tone = TONES.get(name)
        if tone is None:
            return False
        self._sink.write(synthesize(tone, self._sample_rate, self._volume), self._sample_rate)
        return True

    def handle_event(self, event, session=None) -> None:
        """Session listener: play the tone matching the event."""
        self.play(getattr(event, "value", event))
