"""
Enums for the audience simulation state machines
"""

from enum import Enum, auto


class PerformancePhase(Enum):
    """
    Stage-level performance state

    IDLE: Waiting for a performer (loud input or manual start)
    PERFORMING: A performance is recognized as ongoing
    """
    IDLE = auto()
    PERFORMING = auto()


class LightRamp(Enum):
    """Stage light sub-state (runs concurrently with PerformancePhase)"""
    STEADY = auto()
    DIMMING = auto()       # 1.0 → 0.5 while a performance starts
    BRIGHTENING = auto()   # 0.5 → 1.0 after a performance ends


class BehaviorState(Enum):
    """
    Per-audience-member behavior

    INTERRUPTING and CLAPPING are mutually exclusive.
    """
    IDLE = auto()
    INTERRUPTING = auto()
    CLAPPING = auto()


class RampDirection(Enum):
    """Clap envelope direction (sign of the per-tick elapsed delta)"""
    INCREASING = 1
    DECREASING = -1
    IDLE = 0


class TaskKind(Enum):
    """Kinds of suspended, tick-driven tasks"""
    DELAY = auto()     # wait N seconds then act
    RAMP = auto()      # interpolate over a duration
    POLL = auto()      # resume until a condition holds
    ENVELOPE = auto()  # clap volume/speed envelope


class CatalogBucket(Enum):
    """Interruption catalog buckets"""
    GENERAL = "general_interruptions"
    CLAPS = "claps"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    STAGE = auto()       # Performance start/end, hysteresis timers
    AUDIENCE = auto()    # Audience member behavior
    LIGHTING = auto()    # Light ramps
    EVENT = auto()       # Event bus events and handling
    TASK = auto()        # Suspended task scheduling
    RUNTIME = auto()     # Tick loop, collaborators
    SYSTEM = auto()      # Startup, shutdown, errors
