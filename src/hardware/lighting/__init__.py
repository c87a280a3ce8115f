from .light_interface import ILightingSink
from .virtual_light import VirtualStageLight

__all__ = [
    "ILightingSink",
    "VirtualStageLight",
]
