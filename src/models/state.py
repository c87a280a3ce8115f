"""
Runtime state models

PerformanceState is owned (and written) only by the StageController.
AudienceMemberState is owned by a single AudienceMember; no state is shared
between members.
"""

from dataclasses import dataclass

from models.enums import PerformancePhase, LightRamp, BehaviorState, RampDirection

DIMMED_INTENSITY = 0.5
FULL_INTENSITY = 1.0


@dataclass
class PerformanceState:
    phase: PerformancePhase = PerformancePhase.IDLE
    light_ramp: LightRamp = LightRamp.STEADY
    light_intensity: float = FULL_INTENSITY
    silence_timer: float = 0.0
    noise_debounce_timer: float = 0.0
    clapping: bool = False  # edge flag for clapping-started/stopped
    tick: int = 0

    @property
    def active(self) -> bool:
        return self.phase == PerformancePhase.PERFORMING

    @property
    def lights_dimming(self) -> bool:
        """True while any light ramp is in flight"""
        return self.light_ramp != LightRamp.STEADY


@dataclass
class AudienceMemberState:
    behavior: BehaviorState = BehaviorState.IDLE
    follows_performance: bool = False
    clap_envelope: float = 0.0
    clap_direction: RampDirection = RampDirection.IDLE
    volume: float = 0.0
    animation_speed: float = 1.0
    interruptions_fired: int = 0
    claps_started: int = 0
