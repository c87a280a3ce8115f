from __future__ import annotations
from typing import List, Tuple
from hardware.audio.audio_interface import IAudioSink


class VirtualAudioSink(IAudioSink):
    """Records audio calls instead of producing sound (headless runs, tests)"""

    def __init__(self, name: str = "audio"):
        self.name = name
        self.volume = 1.0
        self.loop = False
        self.played: List[Tuple[str, bool]] = []
        self.volume_trace: List[float] = []

    def play_clip(self, clip: str, loop: bool = False) -> None:
        self.loop = loop
        self.played.append((clip, loop))

    def set_volume(self, volume: float) -> None:
        self.volume = volume
        self.volume_trace.append(volume)

    def set_loop(self, loop: bool) -> None:
        self.loop = loop
