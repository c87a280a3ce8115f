"""
Engine - stage and audience state machines on a tick-driven scheduler
"""

from .task_scheduler import TaskScheduler, ScheduledTask, DelayTask, RampTask, PollTask, lerp
from .stage_controller import StageController
from .audience_member import AudienceMember, ClapEnvelopeTask
from .audience import Audience, CollaboratorFactory

__all__ = [
    "TaskScheduler",
    "ScheduledTask",
    "DelayTask",
    "RampTask",
    "PollTask",
    "lerp",
    "StageController",
    "AudienceMember",
    "ClapEnvelopeTask",
    "Audience",
    "CollaboratorFactory",
]
