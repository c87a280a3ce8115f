from .animator_interface import IAnimationSink
from .virtual_animator import VirtualAnimator

__all__ = [
    "IAnimationSink",
    "VirtualAnimator",
]
