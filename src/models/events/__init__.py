"""
Event system for the audience simulation

Four stage-level signals, published synchronously on the EventBus.
"""

from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

from models.events.performance_events import (
    PerformanceStartedEvent,
    PerformanceEndedEvent,
    ClappingStartedEvent,
    ClappingStoppedEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",

    "PerformanceStartedEvent",
    "PerformanceEndedEvent",
    "ClappingStartedEvent",
    "ClappingStoppedEvent",
]
