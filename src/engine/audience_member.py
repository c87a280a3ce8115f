"""
Audience Member

One simulated spectator. Reacts to the four stage signals and runs its own
behavior state machine on the shared TaskScheduler:

    IDLE ⇄ INTERRUPTING     random interruptions while a performance runs
    IDLE ⇄ CLAPPING         clap envelope while the performer is silent

Entering CLAPPING cancels any pending interruption wait or animation monitor.
"""

from __future__ import annotations

import random
from typing import List, Optional

from engine.task_scheduler import (
    TIME_EPSILON,
    DelayTask,
    PollTask,
    ScheduledTask,
    TaskScheduler,
    lerp,
    reached,
)
from hardware.animation.animator_interface import IAnimationSink
from hardware.audio.audio_interface import IAudioSink
from models.config import AudienceConfig
from models.enums import BehaviorState, CatalogBucket, RampDirection, TaskKind
from models.events import Event, EventType
from models.interruption import InterruptionCatalog, NO_ANIMATION
from models.state import AudienceMemberState
from services.event_bus import EventBus, Subscription
from utils.errors import MissingCollaboratorError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.AUDIENCE)


class ClapEnvelopeTask(ScheduledTask):
    """Advances a member's clap envelope once per tick until it decays to zero"""

    kind = TaskKind.ENVELOPE

    def __init__(self, member: "AudienceMember", **kwargs):
        super().__init__(owner=member, **kwargs)
        self._member = member

    def step(self, dt: float) -> bool:
        self.elapsed += dt
        return self._member._advance_envelope(dt)


class AudienceMember:
    """
    Reactive per-actor behavior

    Example:
        member = AudienceMember("member-1", AudienceConfig(), catalog, bus, scheduler,
                                audio=VirtualAudioSink(), animator=VirtualAnimator(scheduler))
        member.attach()
    """

    def __init__(
        self,
        name: str,
        config: AudienceConfig,
        catalog: InterruptionCatalog,
        event_bus: EventBus,
        scheduler: TaskScheduler,
        audio: IAudioSink,
        animator: IAnimationSink,
        rng: Optional[random.Random] = None,
    ):
        for collaborator, label in (
            (catalog, "interruption catalog"),
            (event_bus, "event bus"),
            (scheduler, "task scheduler"),
            (audio, "audio sink"),
            (animator, "animation sink"),
        ):
            if collaborator is None:
                raise MissingCollaboratorError(f"AudienceMember {name}", label)

        config.validate("audience")
        self.name = name
        self.config = config
        self.catalog = catalog
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.audio = audio
        self.animator = animator
        self.rng = rng or random.Random()

        self.state = AudienceMemberState()
        self._loop_task: Optional[ScheduledTask] = None   # interruption wait or monitor
        self._clap_task: Optional[ClapEnvelopeTask] = None
        self._subscriptions: List[Subscription] = []

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    @property
    def attached(self) -> bool:
        return bool(self._subscriptions)

    @property
    def behavior(self) -> BehaviorState:
        return self.state.behavior

    @property
    def follows_performance(self) -> bool:
        return self.state.follows_performance

    def attach(self) -> None:
        """Register on the EventBus (call once the member is created)"""
        if self.attached:
            return
        self._subscriptions = [
            self.event_bus.subscribe(EventType.PERFORMANCE_STARTED, self.on_performance_started),
            self.event_bus.subscribe(EventType.PERFORMANCE_ENDED, self.on_performance_ended),
            self.event_bus.subscribe(EventType.CLAPPING_STARTED, self.on_clapping_started),
            self.event_bus.subscribe(EventType.CLAPPING_STOPPED, self.on_clapping_stopped),
        ]
        log.debug("Audience member attached", member=self.name)

    def detach(self) -> None:
        """Deregister from the EventBus and drop every pending task"""
        for subscription in self._subscriptions:
            self.event_bus.unsubscribe(subscription)
        self._subscriptions = []
        self.scheduler.cancel_owner(self)
        self._loop_task = None
        self._clap_task = None
        self._reset_collaborators()
        log.debug("Audience member detached", member=self.name)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_performance_started(self, event: Event) -> None:
        self.state.follows_performance = True
        self._cancel_loop()
        if self.state.behavior == BehaviorState.INTERRUPTING:
            self._set_behavior(BehaviorState.IDLE)
        if self.state.behavior == BehaviorState.IDLE:
            self._schedule_next_interruption()

    def on_performance_ended(self, event: Event) -> None:
        self.state.follows_performance = False
        self._cancel_loop()

        if self._clap_task is not None:
            self.scheduler.cancel(self._clap_task)
            self._clap_task = None
            self.state.clap_envelope = 0.0
            self.state.clap_direction = RampDirection.IDLE
            self._reset_collaborators()
        elif self.state.behavior == BehaviorState.INTERRUPTING:
            self.animator.set_interruption(NO_ANIMATION)

        self.audio.set_loop(False)
        self._set_behavior(BehaviorState.IDLE)

    def on_clapping_started(self, event: Event) -> None:
        # A stale interruption must never fire once clapping has begun
        self._cancel_loop()

        self.state.clap_direction = RampDirection.INCREASING
        self._set_behavior(BehaviorState.CLAPPING)

        if self._clap_task is None:
            self._start_clap()

    def on_clapping_stopped(self, event: Event) -> None:
        if self._clap_task is None:
            return
        self.state.clap_direction = RampDirection.DECREASING
        log.debug("Clap envelope decaying", member=self.name, elapsed=f"{self.state.clap_envelope:.2f}")

    # ------------------------------------------------------------------
    # Random interruptions
    # ------------------------------------------------------------------

    def _draw_delay(self) -> float:
        low = self.config.interruption_delay_time - self.config.interruption_variability
        high = self.config.interruption_delay_time + self.config.interruption_variability
        return max(0.0, self.rng.uniform(low, high))

    def _schedule_next_interruption(self) -> None:
        if self.catalog.is_empty(CatalogBucket.GENERAL):
            log.debug("No general interruptions in catalog, staying quiet", member=self.name)
            return

        delay = self._draw_delay()
        self._loop_task = self.scheduler.schedule(
            DelayTask(
                delay,
                self._fire_interruption,
                owner=self,
                description=f"{self.name} interruption wait",
            )
        )
        log.debug("Next interruption scheduled", member=self.name, delay=f"{delay:.2f}s")

    def _fire_interruption(self) -> None:
        self._loop_task = None
        if not self.state.follows_performance or self.state.behavior != BehaviorState.IDLE:
            return

        definition = self.catalog.pick(CatalogBucket.GENERAL, self.rng)
        if definition is None:
            return

        if definition.has_sound:
            self.audio.play_clip(definition.sound)
        self.animator.set_interruption(definition.animation_id)
        self.state.interruptions_fired += 1
        self._set_behavior(BehaviorState.INTERRUPTING)

        log.info(
            "Interruption fired",
            member=self.name,
            animation_id=definition.animation_id,
            sound=definition.sound,
        )

        self._loop_task = self.scheduler.schedule(
            PollTask(
                self._animation_at_rest,
                self._on_interruption_finished,
                owner=self,
                description=f"{self.name} interruption monitor",
            )
        )

    def _animation_at_rest(self) -> bool:
        return self.animator.current_state_name() == self.config.idle_state_name

    def _on_interruption_finished(self) -> None:
        self._loop_task = None
        self.animator.set_interruption(NO_ANIMATION)
        self._set_behavior(BehaviorState.IDLE)
        if self.state.follows_performance:
            self._schedule_next_interruption()

    def _cancel_loop(self) -> None:
        if self._loop_task is not None:
            self.scheduler.cancel(self._loop_task)
            self._loop_task = None

    # ------------------------------------------------------------------
    # Clap envelope
    # ------------------------------------------------------------------

    def _start_clap(self) -> None:
        definition = self.catalog.pick(CatalogBucket.CLAPS, self.rng)
        if definition is not None:
            if definition.has_sound:
                self.audio.play_clip(definition.sound, loop=True)
            self.animator.set_interruption(definition.animation_id)
        self.state.claps_started += 1

        self._emit_envelope()
        self._clap_task = self.scheduler.schedule(
            ClapEnvelopeTask(self, description=f"{self.name} clap envelope")
        )
        log.info(
            "Clapping started",
            member=self.name,
            animation_id=definition.animation_id if definition else NO_ANIMATION,
        )

    def envelope_level(self) -> float:
        """Current volume/speed value of the clap envelope"""
        duration = self.config.clap_ramp_duration
        if duration <= 0:
            return 1.0 if self.state.clap_direction == RampDirection.INCREASING else 0.0
        return lerp(0.0, 1.0, self.state.clap_envelope / duration)

    def _emit_envelope(self) -> None:
        level = self.envelope_level()
        self.state.volume = level
        self.audio.set_volume(level)
        self._set_speed(level)

    def _advance_envelope(self, dt: float) -> bool:
        """
        One envelope tick. Direction changes made by events since the last
        tick apply here, never mid-tick.

        Returns:
            True when the envelope has decayed to zero and clapping is over
        """
        state = self.state
        duration = self.config.clap_ramp_duration
        envelope = state.clap_envelope + dt * state.clap_direction.value
        if reached(envelope, duration):
            envelope = duration
        elif envelope <= TIME_EPSILON:
            envelope = 0.0
        state.clap_envelope = envelope
        self._emit_envelope()

        if state.clap_envelope <= 0.0 and state.clap_direction == RampDirection.DECREASING:
            self._finish_clap()
            return True
        return False

    def _finish_clap(self) -> None:
        self._clap_task = None
        self.state.clap_envelope = 0.0
        self.state.clap_direction = RampDirection.IDLE
        self._reset_collaborators()
        self._set_behavior(BehaviorState.IDLE)

        log.info("Clapping finished", member=self.name)
        if self.state.follows_performance:
            self._schedule_next_interruption()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reset_collaborators(self) -> None:
        """Normal speed, no interruption animation (cancels its playback), no loop"""
        self._set_speed(1.0)
        self.animator.set_interruption(NO_ANIMATION)
        self.audio.set_loop(False)

    def _set_speed(self, speed: float) -> None:
        self.state.animation_speed = speed
        self.animator.set_speed(speed)

    def _set_behavior(self, behavior: BehaviorState) -> None:
        if behavior == self.state.behavior:
            return
        log.debug(
            "Behavior changed",
            member=self.name,
            old=self.state.behavior.name,
            new=behavior.name,
        )
        self.state.behavior = behavior

    def __repr__(self) -> str:
        return f"AudienceMember({self.name}, {self.state.behavior.name})"
