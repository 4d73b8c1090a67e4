"""Posterior store: per-muscle-group Beta beliefs plus a bounded history.

Every value here is a frozen snapshot. The state updater builds new
snapshots instead of mutating old ones, so a host can hand the previous
state to readers while the next one is computed.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone

from volume_engine.models.context import BanditContext
from volume_engine.models.enums import (
    DEFAULT_PRIOR_ALPHA,
    DEFAULT_PRIOR_BETA,
    VolumeAction,
)


@dataclass(frozen=True)
class ActionPrior:
    """Beta(alpha, beta) belief that an action succeeds for a muscle group."""

    alpha: float = DEFAULT_PRIOR_ALPHA
    beta: float = DEFAULT_PRIOR_BETA

    @property
    def mean(self) -> float:
        return self.alpha / (self.alpha + self.beta)


DEFAULT_PRIOR = ActionPrior()


@dataclass(frozen=True)
class MuscleGroupState:
    """One ActionPrior per VolumeAction; unobserved actions hold the default."""

    decrease: ActionPrior = DEFAULT_PRIOR
    maintain: ActionPrior = DEFAULT_PRIOR
    increase: ActionPrior = DEFAULT_PRIOR

    def prior_for(self, action: VolumeAction) -> ActionPrior:
        return getattr(self, action.label)

    def with_prior(self, action: VolumeAction, prior: ActionPrior) -> MuscleGroupState:
        return dataclasses.replace(self, **{action.label: prior})


@dataclass(frozen=True)
class HistoryEntry:
    """A single observed (context, action, reward) triple."""

    timestamp: datetime
    muscle_group: str
    action: VolumeAction
    reward: float
    context: BanditContext


@dataclass(frozen=True)
class BanditState:
    """Immutable snapshot of everything the bandit has learned for one user.

    ``history`` is oldest-first and never longer than the configured limit.
    """

    muscle_group_states: dict[str, MuscleGroupState] = field(default_factory=dict)
    total_updates: int = 0
    last_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    history: tuple[HistoryEntry, ...] = field(default_factory=tuple)

    def has_group(self, muscle_group: str) -> bool:
        return muscle_group in self.muscle_group_states
