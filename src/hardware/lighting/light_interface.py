# hardware/lighting/light_interface.py
"""
ILightingSink Protocol
======================
Receives stage light intensity updates during ramps. No other contract.
"""

from __future__ import annotations
from typing import Protocol


class ILightingSink(Protocol):

    def set_intensity(self, intensity: float) -> None:
        """Apply a stage light intensity in [0.5, 1.0]."""
        ...
