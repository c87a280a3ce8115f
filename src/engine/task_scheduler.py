"""
Task Scheduler
--------------

Tick-driven replacement for coroutines. Every multi-tick activity (light
ramps, interruption waits, animation monitors, clap envelopes) is an explicit
suspended task that the scheduler resumes once per tick.

Rules:
- tick() resumes, in scheduling order, only tasks that were active when the
  tick began; a task scheduled during a tick first runs on the next tick
- cancel() removes a task immediately; a task cancelled mid-tick is not
  resumed later in that tick
- a task that raises is logged and dropped, other tasks keep running
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from models.enums import TaskKind
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)

# Slack for accumulated float time (ten ticks of 0.1 sum to 0.9999999999999999)
TIME_EPSILON = 1e-9


def reached(elapsed: float, target: float) -> bool:
    """True once accumulated time has reached `target`, within TIME_EPSILON"""
    return elapsed >= target - TIME_EPSILON


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation, t clamped to [0, 1]"""
    t = max(0.0, min(1.0, t))
    return start + (end - start) * t


# ---------------------------------------------------------------------------
# TASKS
# ---------------------------------------------------------------------------

class ScheduledTask:
    """
    Base suspended task

    Subclasses implement step(dt) and return True once finished.
    """

    kind: TaskKind

    def __init__(self, *, owner: Any = None, description: str = ""):
        self.id: Optional[int] = None
        self.owner = owner
        self.description = description
        self.elapsed = 0.0
        self.cancelled = False
        self.finished = False
        self.error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self.cancelled or self.finished

    def step(self, dt: float) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, {self.description!r}, elapsed={self.elapsed:.2f})"


class DelayTask(ScheduledTask):
    """Wait `duration` seconds of accumulated tick time, then call on_complete"""

    kind = TaskKind.DELAY

    def __init__(self, duration: float, on_complete: Callable[[], None], **kwargs):
        super().__init__(**kwargs)
        self.duration = max(0.0, duration)
        self.on_complete = on_complete

    def step(self, dt: float) -> bool:
        self.elapsed += dt
        if reached(self.elapsed, self.duration):
            self.finished = True
            self.on_complete()
            return True
        return False


class RampTask(ScheduledTask):
    """
    Linear ramp from `start` to `end` over `duration` seconds

    Each tick emits lerp(start, end, min(elapsed / duration, 1)); the ramp
    ends on the tick where elapsed reaches duration, with `end` emitted exactly.
    """

    kind = TaskKind.RAMP

    def __init__(
        self,
        duration: float,
        start: float,
        end: float,
        on_value: Callable[[float], None],
        on_complete: Optional[Callable[[], None]] = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.duration = max(0.0, duration)
        self.start = start
        self.end = end
        self.on_value = on_value
        self.on_complete = on_complete

    @property
    def progress(self) -> float:
        if self.duration <= 0 or reached(self.elapsed, self.duration):
            return 1.0
        return min(self.elapsed / self.duration, 1.0)

    @property
    def value(self) -> float:
        if self.progress >= 1.0:
            return self.end
        return lerp(self.start, self.end, self.progress)

    def step(self, dt: float) -> bool:
        self.elapsed += dt
        self.on_value(self.value)
        if reached(self.elapsed, self.duration):
            self.finished = True
            if self.on_complete:
                self.on_complete()
            return True
        return False


class PollTask(ScheduledTask):
    """Check `condition` every tick; call on_complete the first time it holds"""

    kind = TaskKind.POLL

    def __init__(self, condition: Callable[[], bool], on_complete: Callable[[], None], **kwargs):
        super().__init__(**kwargs)
        self.condition = condition
        self.on_complete = on_complete
        self.polls = 0

    def step(self, dt: float) -> bool:
        self.elapsed += dt
        self.polls += 1
        if self.condition():
            self.finished = True
            self.on_complete()
            return True
        return False


# ---------------------------------------------------------------------------
# SCHEDULER
# ---------------------------------------------------------------------------

class TaskScheduler:
    """
    Single-threaded cooperative scheduler for suspended tasks

    Example:
        scheduler = TaskScheduler()
        scheduler.schedule(DelayTask(2.0, fire, owner=member, description="interruption wait"))

        for _ in range(3):
            scheduler.tick(1.0)   # fire() runs during the second tick
    """

    def __init__(self) -> None:
        self._tasks: List[ScheduledTask] = []
        self._next_id: int = 1
        self._in_tick = False
        self.tick_count = 0
        self.time = 0.0

        # Counters for summary()
        self._completed = 0
        self._cancelled = 0
        self._failed = 0

    def schedule(self, task: ScheduledTask) -> ScheduledTask:
        """Register a task; returns it for convenience"""
        if task.done:
            raise ValueError(f"Cannot schedule a finished task: {task!r}")
        if task.id is not None:
            raise ValueError(f"Task already scheduled: {task!r}")

        task.id = self._next_id
        self._next_id += 1
        self._tasks.append(task)

        log.debug(f"[Task {task.id}] Scheduled ({task.kind.name}) - {task.description}")
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> bool:
        """
        Cancel a task

        Returns:
            True if the task was pending and is now cancelled
        """
        if task is None or task.done:
            return False

        task.cancelled = True
        if task in self._tasks:
            self._tasks.remove(task)
        self._cancelled += 1

        log.debug(f"[Task {task.id}] Cancelled - {task.description}")
        return True

    def cancel_owner(self, owner: Any) -> int:
        """Cancel every pending task belonging to `owner`"""
        owned = [t for t in self._tasks if t.owner is owner]
        for task in owned:
            self.cancel(task)
        return len(owned)

    def tick(self, dt: float) -> None:
        """Resume every task that was active when this tick began"""
        if dt <= 0:
            raise ValueError(f"dt must be > 0, got {dt}")
        if self._in_tick:
            raise RuntimeError("TaskScheduler.tick() is not re-entrant")

        self._in_tick = True
        self.tick_count += 1
        self.time += dt
        try:
            for task in list(self._tasks):
                if task.done:
                    continue

                try:
                    if task.step(dt):
                        task.finished = True
                        self._completed += 1
                except Exception as e:
                    task.error = e
                    task.finished = True
                    self._failed += 1
                    log.error(f"[Task {task.id}] FAILED: {e!r}", task=task.description)

            self._tasks = [t for t in self._tasks if not t.done]
        finally:
            self._in_tick = False

    # -----------------------------
    # Introspection
    # -----------------------------

    def active(self) -> List[ScheduledTask]:
        """Return pending tasks in scheduling order"""
        return list(self._tasks)

    def owned_by(self, owner: Any) -> List[ScheduledTask]:
        return [t for t in self._tasks if t.owner is owner]

    def summary(self) -> str:
        """Return human-readable summary for logs."""
        return (
            f"Tasks: running={len(self._tasks)}, completed={self._completed}, "
            f"cancelled={self._cancelled}, failed={self._failed}"
        )

    def __len__(self) -> int:
        return len(self._tasks)
