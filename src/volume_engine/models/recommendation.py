"""Engine outputs and feedback inputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from volume_engine.models.context import BanditContext
from volume_engine.models.enums import VolumeAction


@dataclass(frozen=True)
class BanditRecommendation:
    """The engine's pick for one muscle group, with its explanation.

    ``sampled_values`` holds the raw Thompson draws so a presentation layer
    can chart how close the decision was.
    """

    action: VolumeAction
    confidence: float  # 0.1-0.95
    reasoning: str
    sampled_values: dict[VolumeAction, float] = field(default_factory=dict)
    contextual_adjustments: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BanditUpdate:
    """An observed outcome to fold into the posterior for (muscle_group, action)."""

    action: VolumeAction
    context: BanditContext
    reward: float  # 0.0-1.0, from calculate_reward()
    muscle_group: str
    timestamp: datetime


@dataclass(frozen=True)
class WorkoutFeedback:
    """Post-workout and next-day feedback for one muscle group's session."""

    performance_change: float  # -1.0-1.0, negative = declined
    perceived_difficulty: int  # 1-5, 4 is ideal
    soreness_24h: int | None = None  # 1-5, next-day check-in
    satisfaction: int | None = None  # 1-5


@dataclass(frozen=True)
class VolumeChange:
    """Concrete set-count adjustment derived from a VolumeAction.

    ``change`` is the delta actually applied after clamping, not the
    nominal step for the action.
    """

    new_sets: int
    change: int
    description: str
