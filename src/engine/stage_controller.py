"""
Stage Controller

Turns a continuous loudness signal into discrete performance transitions:

- IDLE + loud input (or start_performance())  → PERFORMING, lights dim
- PERFORMING + silence                        → clapping-started (once per silence run)
- PERFORMING + noise                          → clapping-stopped (once, immediately)
- PERFORMING + noise for continue time        → silence timer reset
- PERFORMING + silence for end time           → IDLE, lights brighten

All transitions are published synchronously on the EventBus before update()
returns. Light ramps run as RampTasks on the shared TaskScheduler.
"""

from typing import Optional

from engine.task_scheduler import RampTask, TaskScheduler, reached
from hardware.lighting.light_interface import ILightingSink
from models.config import StageConfig
from models.enums import LightRamp, PerformancePhase
from models.events import (
    EventSource,
    PerformanceStartedEvent,
    PerformanceEndedEvent,
    ClappingStartedEvent,
    ClappingStoppedEvent,
)
from models.state import PerformanceState, DIMMED_INTENSITY, FULL_INTENSITY
from services.event_bus import EventBus
from utils.errors import MissingCollaboratorError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STAGE)
light_log = get_logger().for_category(LogCategory.LIGHTING)


class StageController:
    """
    Performance hysteresis state machine and stage light ramps

    Example:
        stage = StageController(StageConfig(), bus, scheduler, light)

        for loudness in samples:
            scheduler.tick(dt)
            stage.update(loudness, dt)
    """

    def __init__(
        self,
        config: StageConfig,
        event_bus: EventBus,
        scheduler: TaskScheduler,
        lighting: ILightingSink,
    ):
        if event_bus is None:
            raise MissingCollaboratorError("StageController", "event bus")
        if scheduler is None:
            raise MissingCollaboratorError("StageController", "task scheduler")
        if lighting is None:
            raise MissingCollaboratorError("StageController", "lighting sink")

        config.validate("stage")
        self.config = config
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.lighting = lighting

        self.state = PerformanceState()
        self._end_performance_time = config.end_performance_time
        self._light_task: Optional[RampTask] = None

        self.lighting.set_intensity(self.state.light_intensity)

        log.info(
            "StageController initialized",
            threshold=config.loudness_threshold,
            sensitivity=config.loudness_sensitivity,
            end_after=f"{config.end_performance_time}s",
            continue_after=f"{config.continue_performance_time}s",
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def is_performing(self) -> bool:
        return self.state.active

    @property
    def light_intensity(self) -> float:
        return self.state.light_intensity

    @property
    def end_performance_time(self) -> float:
        return self._end_performance_time

    # ------------------------------------------------------------------
    # Per-tick update
    # ------------------------------------------------------------------

    def update(self, loudness: float, dt: float) -> None:
        """
        Process one loudness sample

        Args:
            loudness: Raw loudness (>= 0), scaled by loudness_sensitivity before thresholding
            dt: Tick duration in seconds (> 0)
        """
        if dt <= 0:
            raise ValueError(f"dt must be > 0, got {dt}")

        state = self.state
        state.tick += 1
        loud = max(0.0, loudness) * self.config.loudness_sensitivity >= self.config.loudness_threshold

        if not state.active:
            if loud:
                self._begin_performance(EventSource.STAGE)
            return

        if not loud:
            state.silence_timer += dt
            state.noise_debounce_timer = 0.0

            if not state.clapping:
                state.clapping = True
                log.info("Silence detected, audience starts clapping", tick=state.tick)
                self.event_bus.publish(ClappingStartedEvent(tick=state.tick))

            if reached(state.silence_timer, self._end_performance_time):
                self._finish_performance(EventSource.STAGE)
            return

        state.noise_debounce_timer += dt

        if state.clapping:
            state.clapping = False
            log.info("Noise resumed, audience stops clapping", tick=state.tick)
            self.event_bus.publish(ClappingStoppedEvent(tick=state.tick))

        if reached(state.noise_debounce_timer, self.config.continue_performance_time) and state.silence_timer > 0:
            log.debug(
                "Sustained noise, silence timer reset",
                silence=f"{state.silence_timer:.2f}s",
                noise=f"{state.noise_debounce_timer:.2f}s",
            )
            state.silence_timer = 0.0

    # ------------------------------------------------------------------
    # External triggers
    # ------------------------------------------------------------------

    def start_performance(self) -> bool:
        """
        Manually start a performance (no-op while already performing)

        Returns:
            True if a performance was started
        """
        if self.state.active:
            log.debug("start_performance ignored, already performing")
            return False
        self._begin_performance(EventSource.MANUAL)
        return True

    def end_performance(self) -> bool:
        """
        Manually end a performance (no-op while idle)

        Returns:
            True if a performance was ended
        """
        if not self.state.active:
            log.debug("end_performance ignored, not performing")
            return False
        self._finish_performance(EventSource.MANUAL)
        return True

    def toggle_automatic_ending(self) -> float:
        """
        Swap the silence timeout between its configured value and the
        manual (effectively disabled) value.

        Returns:
            The new end-performance time
        """
        if self._end_performance_time == self.config.end_performance_time:
            self._end_performance_time = self.config.manual_end_performance_time
        else:
            self._end_performance_time = self.config.end_performance_time

        log.info("Automatic ending toggled", end_after=f"{self._end_performance_time}s")
        return self._end_performance_time

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin_performance(self, source: EventSource) -> None:
        state = self.state
        state.phase = PerformancePhase.PERFORMING
        state.silence_timer = 0.0
        state.noise_debounce_timer = 0.0
        state.clapping = False

        log.info("Performance started", source=source.name, tick=state.tick)
        self.event_bus.publish(PerformanceStartedEvent(tick=state.tick, source=source))
        self._start_dimming()

    def _finish_performance(self, source: EventSource) -> None:
        state = self.state
        silence = state.silence_timer
        state.phase = PerformancePhase.IDLE
        state.silence_timer = 0.0
        state.noise_debounce_timer = 0.0
        state.clapping = False

        log.info("Performance ended", source=source.name, silence=f"{silence:.2f}s", tick=state.tick)
        self.event_bus.publish(PerformanceEndedEvent(tick=state.tick, silence=silence, source=source))
        self._start_brightening()

    # ------------------------------------------------------------------
    # Light ramps
    # ------------------------------------------------------------------

    def _start_dimming(self) -> None:
        if self.state.lights_dimming:
            light_log.debug("Dim skipped, light ramp already in flight", ramp=self.state.light_ramp.name)
            return
        self._start_ramp(LightRamp.DIMMING, FULL_INTENSITY, DIMMED_INTENSITY, self.config.dim_time)

    def _start_brightening(self) -> None:
        if self.state.light_ramp == LightRamp.BRIGHTENING:
            light_log.debug("Brighten skipped, already brightening")
            return
        if self.state.light_ramp == LightRamp.DIMMING:
            self.scheduler.cancel(self._light_task)
            light_log.debug("Dim cancelled by brighten")
        self._start_ramp(LightRamp.BRIGHTENING, DIMMED_INTENSITY, FULL_INTENSITY, self.config.brighten_time)

    def _start_ramp(self, ramp: LightRamp, start: float, end: float, duration: float) -> None:
        self.state.light_ramp = ramp
        self._apply_intensity(start)
        self._light_task = RampTask(
            duration,
            start,
            end,
            on_value=self._apply_intensity,
            on_complete=self._on_ramp_complete,
            owner=self,
            description=f"lights {ramp.name.lower()}",
        )
        self.scheduler.schedule(self._light_task)
        light_log.info(f"Lights {ramp.name.lower()}", start=start, end=end, duration=f"{duration}s")

    def _apply_intensity(self, intensity: float) -> None:
        self.state.light_intensity = intensity
        self.lighting.set_intensity(intensity)
        light_log.debug("Light intensity", intensity=f"{intensity:.3f}")

    def _on_ramp_complete(self) -> None:
        light_log.info("Light ramp complete", ramp=self.state.light_ramp.name, intensity=self.state.light_intensity)
        self.state.light_ramp = LightRamp.STEADY
        self._light_task = None
