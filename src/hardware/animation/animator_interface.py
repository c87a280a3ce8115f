# hardware/animation/animator_interface.py
"""
IAnimationSink Protocol
=======================
Animation parameters/triggers for one audience member, plus the state query
used to detect when an interruption animation is over.
"""

from __future__ import annotations
from typing import Protocol


class IAnimationSink(Protocol):
    """
    Protocol defining the animation calls an audience member makes.

    - set_interruption: select the interruption animation variant (0 = none)
    - set_speed: playback speed multiplier (1.0 = normal)
    - current_state_name: name of the state currently playing
    """

    def set_interruption(self, animation_id: int) -> None:
        ...

    def set_speed(self, speed: float) -> None:
        ...

    def current_state_name(self) -> str:
        ...
