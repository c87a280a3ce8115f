"""
Hardware Layer

External collaborators of the simulation, each behind a Protocol:

- loudness source (scripted trace or microphone)
- per-member audio sink and animator
- stage lighting sink

Virtual implementations record every call for headless runs and tests.
"""
from .audio import IAudioSink, VirtualAudioSink
from .animation import IAnimationSink, VirtualAnimator
from .lighting import ILightingSink, VirtualStageLight
from .loudness import ILoudnessSource, ScriptedLoudnessSource, create_loudness_source

__all__ = [
    "IAudioSink",
    "VirtualAudioSink",
    "IAnimationSink",
    "VirtualAnimator",
    "ILightingSink",
    "VirtualStageLight",
    "ILoudnessSource",
    "ScriptedLoudnessSource",
    "create_loudness_source",
]
