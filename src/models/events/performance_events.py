from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class PerformanceStartedEvent(Event):
    tick: int

    def __init__(self, tick: int, source: EventSource = EventSource.STAGE):
        super().__init__(type=EventType.PERFORMANCE_STARTED, source=source)
        self.tick = tick


@dataclass(init=False)
class PerformanceEndedEvent(Event):
    tick: int
    silence: float

    def __init__(self, tick: int, silence: float, source: EventSource = EventSource.STAGE):
        super().__init__(type=EventType.PERFORMANCE_ENDED, source=source)
        self.tick = tick
        self.silence = silence


@dataclass(init=False)
class ClappingStartedEvent(Event):
    tick: int

    def __init__(self, tick: int):
        super().__init__(type=EventType.CLAPPING_STARTED, source=EventSource.STAGE)
        self.tick = tick


@dataclass(init=False)
class ClappingStoppedEvent(Event):
    tick: int

    def __init__(self, tick: int):
        super().__init__(type=EventType.CLAPPING_STOPPED, source=EventSource.STAGE)
        self.tick = tick
