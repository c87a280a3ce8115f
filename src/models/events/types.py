from enum import Enum, auto


class EventType(Enum):
    # Stage-level performance signals
    PERFORMANCE_STARTED = auto()
    PERFORMANCE_ENDED = auto()

    # Audience clapping signals (edge-triggered by the stage)
    CLAPPING_STARTED = auto()
    CLAPPING_STOPPED = auto()
