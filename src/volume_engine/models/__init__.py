"""Data models for the volume engine."""

from volume_engine.models.context import BanditContext, ContextLevels
from volume_engine.models.enums import (
    ACTIONS,
    MUSCLE_GROUPS,
    FatigueLevel,
    PerformanceTrend,
    RecoveryLevel,
    VolumeAction,
)
from volume_engine.models.recommendation import (
    BanditRecommendation,
    BanditUpdate,
    VolumeChange,
    WorkoutFeedback,
)
from volume_engine.models.state import (
    DEFAULT_PRIOR,
    ActionPrior,
    BanditState,
    HistoryEntry,
    MuscleGroupState,
)

__all__ = [
    "ACTIONS",
    "ActionPrior",
    "BanditContext",
    "BanditRecommendation",
    "BanditState",
    "BanditUpdate",
    "ContextLevels",
    "DEFAULT_PRIOR",
    "FatigueLevel",
    "HistoryEntry",
    "MUSCLE_GROUPS",
    "MuscleGroupState",
    "PerformanceTrend",
    "RecoveryLevel",
    "VolumeAction",
    "VolumeChange",
    "WorkoutFeedback",
]
