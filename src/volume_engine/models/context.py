"""Frozen bandit context: normalized situational signals for one decision."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from volume_engine.models.enums import FatigueLevel, PerformanceTrend, RecoveryLevel


@dataclass(frozen=True)
class BanditContext:
    """Normalized recovery and performance signals for "today".

    Produced by the feature-extraction layer from a rolling ~7-day window of
    workouts and wellness check-ins. The engine only relies on the three
    normalized fields; anything else the pipeline computes rides along in
    ``extras`` and is persisted with history entries.
    """

    fatigue_level: float  # 0.0-1.0, higher = more fatigued
    recovery_score: float  # 0.0-1.0, higher = better recovered
    recent_performance_trend: float  # -1.0-1.0, negative = declining
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContextLevels:
    """Discrete levels a BanditContext falls into."""

    fatigue: FatigueLevel
    recovery: RecoveryLevel
    performance: PerformanceTrend
