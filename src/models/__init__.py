"""
Models package - Data models for the audience simulation
"""

from .enums import (
    PerformancePhase,
    LightRamp,
    BehaviorState,
    RampDirection,
    TaskKind,
    CatalogBucket,
    LogLevel,
    LogCategory,
)
from .interruption import InterruptionDefinition, InterruptionCatalog, NO_ANIMATION
from .config import StageConfig, AudienceConfig, RuntimeConfig, AppConfig
from .state import PerformanceState, AudienceMemberState

__all__ = [
    'PerformancePhase',
    'LightRamp',
    'BehaviorState',
    'RampDirection',
    'TaskKind',
    'CatalogBucket',
    'LogLevel',
    'LogCategory',
    'InterruptionDefinition',
    'InterruptionCatalog',
    'NO_ANIMATION',
    'StageConfig',
    'AudienceConfig',
    'RuntimeConfig',
    'AppConfig',
    'PerformanceState',
    'AudienceMemberState',
]
