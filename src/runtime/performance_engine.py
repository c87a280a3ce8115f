"""
Performance Engine

Wires the stage, the audience, the event bus and the task scheduler, and
advances them one tick at a time:

    1. resume suspended tasks (light ramps, waits, monitors, clap envelopes)
    2. sample loudness and run the stage hysteresis update, publishing events

Anything started by a transition in tick N therefore first advances in tick N+1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from engine.audience import Audience, CollaboratorFactory
from engine.stage_controller import StageController
from engine.task_scheduler import TaskScheduler
from hardware.animation.animator_interface import IAnimationSink
from hardware.animation.virtual_animator import VirtualAnimator
from hardware.audio.audio_interface import IAudioSink
from hardware.audio.virtual_audio import VirtualAudioSink
from hardware.lighting.light_interface import ILightingSink
from hardware.loudness.loudness_interface import ILoudnessSource
from models.config import AppConfig
from models.enums import BehaviorState, PerformancePhase
from models.interruption import InterruptionCatalog
from services.event_bus import EventBus
from utils.errors import MissingCollaboratorError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RUNTIME)


def virtual_collaborators(scheduler: TaskScheduler, idle_state_name: str, clip_length: float) -> CollaboratorFactory:
    """Collaborator factory producing recording audio sinks and simulated animators"""

    def build(name: str) -> Tuple[IAudioSink, IAnimationSink]:
        return (
            VirtualAudioSink(name),
            VirtualAnimator(scheduler, clip_length=clip_length, idle_state_name=idle_state_name),
        )

    return build


@dataclass(frozen=True)
class EngineSnapshot:
    """Point-in-time view for logging and tests"""
    tick: int
    phase: PerformancePhase
    light_intensity: float
    silence_timer: float
    behaviors: Dict[BehaviorState, int]
    pending_tasks: int


class PerformanceEngine:
    """
    Top-level simulation object

    Example:
        engine = PerformanceEngine(config.app_config, config.catalog, loudness, light)
        engine.populate()
        engine.run_ticks(600, dt=1 / 60)
    """

    def __init__(
        self,
        config: AppConfig,
        catalog: InterruptionCatalog,
        loudness: ILoudnessSource,
        lighting: ILightingSink,
        collaborators: Optional[CollaboratorFactory] = None,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[TaskScheduler] = None,
    ):
        if loudness is None:
            raise MissingCollaboratorError("PerformanceEngine", "loudness source")
        if lighting is None:
            raise MissingCollaboratorError("PerformanceEngine", "lighting sink")

        self.config = config
        self.loudness = loudness
        self.scheduler = scheduler or TaskScheduler()
        self.event_bus = event_bus or EventBus()

        self.stage = StageController(config.stage, self.event_bus, self.scheduler, lighting)
        self.audience = Audience(
            config.audience,
            catalog,
            self.event_bus,
            self.scheduler,
            collaborators or virtual_collaborators(
                self.scheduler,
                config.audience.idle_state_name,
                config.runtime.animation_clip_length,
            ),
            seed=config.runtime.seed,
        )
        self.tick_count = 0
        self.last_loudness = 0.0

    def populate(self, count: Optional[int] = None) -> int:
        """Create audience members (defaults to runtime.audience_size)"""
        count = self.config.runtime.audience_size if count is None else count
        self.audience.populate(count)
        return len(self.audience)

    def step(self, dt: float) -> float:
        """
        Advance the whole simulation by one tick

        Returns:
            The loudness sample consumed by this tick
        """
        self.scheduler.tick(dt)
        self.last_loudness = self.loudness.sample()
        self.stage.update(self.last_loudness, dt)
        self.tick_count += 1
        return self.last_loudness

    def run_ticks(self, count: int, dt: float) -> EngineSnapshot:
        """Run `count` fixed-size ticks without real-time pacing"""
        for _ in range(count):
            self.step(dt)
        return self.snapshot()

    # Manual triggers pass straight to the stage
    def start_performance(self) -> bool:
        return self.stage.start_performance()

    def end_performance(self) -> bool:
        return self.stage.end_performance()

    def toggle_automatic_ending(self) -> float:
        return self.stage.toggle_automatic_ending()

    def snapshot(self) -> EngineSnapshot:
        state = self.stage.state
        return EngineSnapshot(
            tick=self.tick_count,
            phase=state.phase,
            light_intensity=state.light_intensity,
            silence_timer=state.silence_timer,
            behaviors=self.audience.behavior_counts(),
            pending_tasks=len(self.scheduler),
        )

    def shutdown(self) -> None:
        """End any running performance and detach the audience"""
        self.stage.end_performance()
        self.audience.clear()
        log.info("Engine shut down", ticks=self.tick_count, tasks=self.scheduler.summary())
