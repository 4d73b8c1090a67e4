"""Context classification and contextual weight lookup.

Buckets the three continuous context signals into discrete levels, then maps
each level to a multiplier per action. The three multipliers for an action
are combined with a geometric mean so a single extreme factor cannot swamp
the other two.
"""

from __future__ import annotations

import math

from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.models.context import BanditContext, ContextLevels
from volume_engine.models.enums import (
    FATIGUE_WEIGHTS,
    PERFORMANCE_WEIGHTS,
    RECOVERY_WEIGHTS,
    FatigueLevel,
    PerformanceTrend,
    RecoveryLevel,
    VolumeAction,
)


def classify_fatigue(fatigue_level: float, config: BanditConfig = DEFAULT_CONFIG) -> FatigueLevel:
    if fatigue_level > config.fatigue_high:
        return FatigueLevel.HIGH
    if fatigue_level > config.fatigue_moderate:
        return FatigueLevel.MODERATE
    return FatigueLevel.LOW


def classify_recovery(recovery_score: float, config: BanditConfig = DEFAULT_CONFIG) -> RecoveryLevel:
    if recovery_score < config.recovery_poor:
        return RecoveryLevel.POOR
    if recovery_score < config.recovery_moderate:
        return RecoveryLevel.MODERATE
    return RecoveryLevel.GOOD


def classify_performance(
    trend: float, config: BanditConfig = DEFAULT_CONFIG
) -> PerformanceTrend:
    if trend < config.trend_declining:
        return PerformanceTrend.DECLINING
    if trend > config.trend_improving:
        return PerformanceTrend.IMPROVING
    return PerformanceTrend.STABLE


def classify_context(
    context: BanditContext, config: BanditConfig = DEFAULT_CONFIG
) -> ContextLevels:
    """Classify all three context dimensions at once."""
    return ContextLevels(
        fatigue=classify_fatigue(context.fatigue_level, config),
        recovery=classify_recovery(context.recovery_score, config),
        performance=classify_performance(context.recent_performance_trend, config),
    )


def action_weights(levels: ContextLevels, action: VolumeAction) -> tuple[float, float, float]:
    """Return the (fatigue, recovery, performance) multipliers for an action."""
    return (
        FATIGUE_WEIGHTS[levels.fatigue][action],
        RECOVERY_WEIGHTS[levels.recovery][action],
        PERFORMANCE_WEIGHTS[levels.performance][action],
    )


def combined_weight(levels: ContextLevels, action: VolumeAction) -> float:
    """Geometric mean of the three contextual multipliers for an action.

    Example:
        High fatigue, poor recovery, declining performance favours decrease:
        (1.5 * 1.6 * 0.8) ** (1/3) ~= 1.24 versus
        (0.5 * 0.4 * 0.6) ** (1/3) ~= 0.49 for increase.
    """
    fatigue_w, recovery_w, performance_w = action_weights(levels, action)
    return math.pow(fatigue_w * recovery_w * performance_w, 1.0 / 3.0)


def describe_context(context: BanditContext, levels: ContextLevels) -> tuple[str, ...]:
    """Human-readable breakdown of how the context was classified."""
    return (
        f"Fatigue: {levels.fatigue.name.lower()} ({context.fatigue_level * 100:.0f}%)",
        f"Recovery: {levels.recovery.name.lower()} ({context.recovery_score * 100:.0f}%)",
        f"Performance: {levels.performance.name.lower()} "
        f"({context.recent_performance_trend * 100:.1f}%)",
    )
