"""
Configuration models

Typed, validated views of the YAML configuration. Every timing value is
checked at load time so that a negative duration can never reach a ramp.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Type, TypeVar

from utils.errors import ConfigError

T = TypeVar("T", bound="_ConfigSection")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class _ConfigSection:
    """Shared from_dict/validate helpers for config dataclasses"""

    # Fields that must be >= 0
    NON_NEGATIVE: tuple = ()
    # Fields that must be > 0
    POSITIVE: tuple = ()

    @classmethod
    def from_dict(cls: Type[T], data: Optional[Dict[str, Any]], section: str) -> T:
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Section '{section}' must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown keys in '{section}': {sorted(unknown)}")

        instance = cls(**data)
        instance.validate(section)
        return instance

    def validate(self, section: str = "") -> None:
        prefix = f"{section}." if section else ""
        for name in self.NON_NEGATIVE:
            value = self._number(name, prefix)
            if value < 0:
                raise ConfigError(f"{prefix}{name} must be >= 0, got {value}")
        for name in self.POSITIVE:
            value = self._number(name, prefix)
            if value <= 0:
                raise ConfigError(f"{prefix}{name} must be > 0, got {value}")

    def _number(self, name: str, prefix: str) -> float:
        value = getattr(self, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{prefix}{name} must be a number, got {value!r}")
        return value


@dataclass
class StageConfig(_ConfigSection):
    """
    Stage hysteresis and lighting parameters (seconds unless noted)

    Attributes:
        loudness_threshold: Scaled loudness at or above which the performer is "playing"
        loudness_sensitivity: Multiplier applied to raw loudness before thresholding
        end_performance_time: Sustained silence that ends a performance
        manual_end_performance_time: Value swapped in by toggle_automatic_ending()
        continue_performance_time: Sustained noise that confirms the performance continues
        dim_time: Duration of the 1.0 → 0.5 light ramp
        brighten_time: Duration of the 0.5 → 1.0 light ramp
    """
    loudness_threshold: float = 1.0
    loudness_sensitivity: float = 100.0
    end_performance_time: float = 10.0
    manual_end_performance_time: float = 1000.0
    continue_performance_time: float = 2.0
    dim_time: float = 2.0
    brighten_time: float = 2.0

    NON_NEGATIVE = (
        "loudness_threshold",
        "end_performance_time",
        "manual_end_performance_time",
        "continue_performance_time",
        "dim_time",
        "brighten_time",
    )
    POSITIVE = ("loudness_sensitivity",)


@dataclass
class AudienceConfig(_ConfigSection):
    """
    Per-member behavior parameters

    Attributes:
        interruption_delay_time: Mean wait between interruptions
        interruption_variability: Half-width of the uniform wait window
        clap_ramp_duration: Time for the clap envelope to go 0 → 1
        idle_state_name: Animation state name reported when a member is back at rest
    """
    interruption_delay_time: float = 30.0
    interruption_variability: float = 20.0
    clap_ramp_duration: float = 5.0
    idle_state_name: str = "Idle"

    NON_NEGATIVE = (
        "interruption_delay_time",
        "interruption_variability",
        "clap_ramp_duration",
    )


@dataclass
class RuntimeConfig(_ConfigSection):
    """
    Simulation runtime parameters

    Attributes:
        tick_rate: Ticks per second of the real-time loop
        audience_size: Number of audience members to populate
        loudness_source: "scripted" or "microphone"
        animation_clip_length: How long a virtual interruption animation plays
        microphone_samplerate: Input sample rate for the microphone source (Hz)
        microphone_block_duration: Block length for RMS computation
        seed: Optional RNG seed for reproducible audiences
    """
    tick_rate: float = 60.0
    audience_size: int = 8
    loudness_source: str = "scripted"
    animation_clip_length: float = 3.0
    microphone_samplerate: int = 16000
    microphone_block_duration: float = 0.05
    seed: Optional[int] = None

    NON_NEGATIVE = ("audience_size", "animation_clip_length")
    POSITIVE = ("tick_rate", "microphone_samplerate", "microphone_block_duration")

    LOUDNESS_SOURCES = ("scripted", "microphone")

    def validate(self, section: str = "") -> None:
        super().validate(section)
        prefix = f"{section}." if section else ""
        if not _is_int(self.audience_size):
            raise ConfigError(f"{prefix}audience_size must be an integer, got {self.audience_size!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise ConfigError(f"{prefix}seed must be an integer or null, got {self.seed!r}")
        if self.loudness_source not in self.LOUDNESS_SOURCES:
            raise ConfigError(
                f"loudness_source must be one of {self.LOUDNESS_SOURCES}, got {self.loudness_source!r}"
            )


@dataclass
class AppConfig:
    """All validated configuration sections"""
    stage: StageConfig
    audience: AudienceConfig
    runtime: RuntimeConfig
