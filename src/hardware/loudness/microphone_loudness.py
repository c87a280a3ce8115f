"""
Microphone loudness source

Captures microphone input with a `sounddevice` InputStream and reports the
RMS of the most recent block. Values are raw RMS (typically 0.0-0.1 for
speech/instruments); the stage applies its sensitivity multiplier.
"""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from hardware.loudness.loudness_interface import ILoudnessSource
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RUNTIME)


class MicrophoneLoudnessSource(ILoudnessSource):

    def __init__(self, samplerate: int = 16000, block_duration: float = 0.05, device: Optional[int] = None):
        self.samplerate = int(samplerate)
        self.blocksize = max(256, int(self.samplerate * block_duration))
        self.device = device

        self._stream: Optional[sd.InputStream] = None
        self._lock = threading.Lock()
        self._last_rms = 0.0

    def _callback(self, indata, frames, time_info, status):
        if status:
            log.debug("Microphone stream status", status=str(status))
        audio = np.asarray(indata, dtype=np.float32)
        if audio.ndim > 1:
            audio = audio.mean(axis=1)
        rms = float(np.sqrt(np.mean(np.square(audio)))) if audio.size else 0.0
        with self._lock:
            self._last_rms = rms

    def start(self) -> None:
        if self._stream is not None:
            return
        self._stream = sd.InputStream(
            samplerate=self.samplerate,
            blocksize=self.blocksize,
            channels=1,
            device=self.device,
            callback=self._callback,
        )
        self._stream.start()
        log.info("Microphone stream started", samplerate=self.samplerate, blocksize=self.blocksize)

    def stop(self) -> None:
        if self._stream is None:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None
        log.info("Microphone stream stopped")

    def sample(self) -> float:
        with self._lock:
            return self._last_rms
