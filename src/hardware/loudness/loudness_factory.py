# loudness_factory.py

from pathlib import Path
from typing import Optional

from hardware.loudness.loudness_interface import ILoudnessSource
from hardware.loudness.scripted_loudness import ScriptedLoudnessSource
from models.config import RuntimeConfig
from runtime.runtime_info import RuntimeInfo
from utils.errors import ConfigError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RUNTIME)


def create_loudness_source(
    config: RuntimeConfig,
    *,
    trace_path: Optional[Path] = None,
) -> ILoudnessSource:
    """
    Build the loudness source named by `config.loudness_source`.

    "scripted" replays `trace_path` (silence if no trace is given).
    "microphone" requires the sounddevice/numpy extra; a missing backend is
    a startup fault, not a silent fallback.
    """
    if config.loudness_source == "microphone":
        if not RuntimeInfo.has_sounddevice():
            raise ConfigError(
                "loudness_source 'microphone' needs sounddevice and numpy (pip install .[mic])"
            )
        from hardware.loudness.microphone_loudness import MicrophoneLoudnessSource

        log.info("Using microphone loudness source")
        return MicrophoneLoudnessSource(
            samplerate=config.microphone_samplerate,
            block_duration=config.microphone_block_duration,
        )

    if trace_path is not None:
        source = ScriptedLoudnessSource.from_file(trace_path)
        log.info("Using scripted loudness trace", path=str(trace_path), samples=len(source))
        return source

    log.warn("No loudness trace given, replaying silence")
    return ScriptedLoudnessSource([], tail=0.0)
