from .loudness_interface import ILoudnessSource
from .scripted_loudness import ScriptedLoudnessSource
from .loudness_factory import create_loudness_source

__all__ = [
    "ILoudnessSource",
    "ScriptedLoudnessSource",
    "create_loudness_source",
]
