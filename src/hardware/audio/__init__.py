from .audio_interface import IAudioSink
from .virtual_audio import VirtualAudioSink

__all__ = [
    "IAudioSink",
    "VirtualAudioSink",
]
