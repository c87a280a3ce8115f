from __future__ import annotations
from typing import List, Optional

from engine.task_scheduler import DelayTask, TaskScheduler
from hardware.animation.animator_interface import IAnimationSink
from models.interruption import NO_ANIMATION


class VirtualAnimator(IAnimationSink):
    """
    Simulated animator

    Triggering an animation leaves the idle state for `clip_length` seconds of
    tick time, then returns to `idle_state_name`. Speed scales playback, so a
    clip at speed 0.5 takes twice as long.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        clip_length: float = 3.0,
        idle_state_name: str = "Idle",
    ):
        self._scheduler = scheduler
        self.clip_length = clip_length
        self.idle_state_name = idle_state_name
        self.animation_id = NO_ANIMATION
        self.speed = 1.0
        self._state = idle_state_name
        self._return_task: Optional[DelayTask] = None
        self.triggered: List[int] = []
        self.speed_trace: List[float] = []

    def set_interruption(self, animation_id: int) -> None:
        self.animation_id = animation_id
        self._scheduler.cancel(self._return_task)
        self._return_task = None

        if animation_id == NO_ANIMATION:
            self._state = self.idle_state_name
            return

        self.triggered.append(animation_id)
        self._state = f"Interruption{animation_id}"
        self._return_task = self._scheduler.schedule(
            _ClipTask(self, owner=self, description=f"animation {animation_id} playback")
        )

    def set_speed(self, speed: float) -> None:
        self.speed = speed
        self.speed_trace.append(speed)

    def current_state_name(self) -> str:
        return self._state

    def _return_to_idle(self) -> None:
        self._return_task = None
        self._state = self.idle_state_name


class _ClipTask(DelayTask):
    """Delay that advances at the animator's current playback speed"""

    def __init__(self, animator: VirtualAnimator, **kwargs):
        super().__init__(animator.clip_length, animator._return_to_idle, **kwargs)
        self._animator = animator

    def step(self, dt: float) -> bool:
        return super().step(dt * self._animator.speed)
