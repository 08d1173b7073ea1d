"""QtMultimedia playback for synthesized tones."""

from __future__ import annotations

import logging

import numpy as np
from PySide6.QtMultimedia import QAudioFormat, QAudioSink, QMediaDevices

logger = logging.getLogger(__name__)


class QtToneSink:
    """Pushes float32 mono samples to the default audio output."""

    def __init__(self, sample_rate: int) -> None:
        device = QMediaDevices.defaultAudioOutput()
        if device.isNull():
            raise RuntimeError("no audio output device")
        fmt = QAudioFormat()
        fmt.setSampleRate(sample_rate)
        fmt.setChannelCount(1)
        fmt.setSampleFormat(QAudioFormat.SampleFormat.Float)
        if not device.isFormatSupported(fmt):
            raise RuntimeError(f"{device.description()} does not support {sample_rate} Hz float output")
        self._sink = QAudioSink(device, fmt)
        self._io = self._sink.start()
        if self._io is None:
            raise RuntimeError("could not open audio output")
        logger.info("Audio output: %s", device.description())

    def write(self, samples: np.ndarray, sample_rate: int) -> None:
        self._io.write(np.ascontiguousarray(samples, dtype=np.float32).tobytes())

    def suspend(self) -> None:
        self._sink.suspend()

    def resume(self) -> None:
        self._sink.resume()

    def close(self) -> None:
        self._sink.stop()
