from __future__ import annotations
from typing import List
from hardware.lighting.light_interface import ILightingSink


class VirtualStageLight(ILightingSink):

    def __init__(self, intensity: float = 1.0):
        self.intensity = intensity
        self.history: List[float] = []

    def set_intensity(self, intensity: float) -> None:
        self.intensity = intensity
        self.history.append(intensity)
