from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    STAGE = auto()      # Loudness hysteresis in the stage controller
    MANUAL = auto()     # External trigger (start_performance / end_performance)
    SYSTEM = auto()     # Runtime / tests
