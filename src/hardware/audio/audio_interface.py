# hardware/audio/audio_interface.py
"""
IAudioSink Protocol
===================
Fire-and-forget audio playback for one audience member.
"""

from __future__ import annotations
from typing import Protocol


class IAudioSink(Protocol):
    """
    Protocol defining the audio calls an audience member makes.

    All implementations must provide:
    - play_clip: start playing an opaque clip handle (never blocks)
    - set_volume: playback volume in [0, 1]
    - set_loop: whether the current clip loops
    """

    def play_clip(self, clip: str, loop: bool = False) -> None:
        """Start playback of `clip`. Returns immediately."""
        ...

    def set_volume(self, volume: float) -> None:
        """Set playback volume (0.0 = silent, 1.0 = full)."""
        ...

    def set_loop(self, loop: bool) -> None:
        """Enable/disable looping of the current clip."""
        ...
