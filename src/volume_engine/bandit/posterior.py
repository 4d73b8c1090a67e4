"""State updater: fold observed rewards into the Beta posteriors.

Each update adds evidence proportional to how far the reward is from neutral,
then shrinks both parameters by a decay factor so that old observations fade
and the bandit can follow a trainee whose response changes over time. A hard
floor keeps alpha and beta from collapsing under repeated decay.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from datetime import datetime, timezone

from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.models.enums import SUCCESS_THRESHOLD, VolumeAction
from volume_engine.models.recommendation import BanditUpdate
from volume_engine.models.state import (
    ActionPrior,
    BanditState,
    HistoryEntry,
    MuscleGroupState,
)

logger = logging.getLogger(__name__)


def initialize(now: datetime | None = None) -> BanditState:
    """Create a fresh bandit state with no observations."""
    return BanditState(
        muscle_group_states={},
        total_updates=0,
        last_update=_as_utc(now) if now is not None else datetime.now(timezone.utc),
        history=(),
    )


def default_group_state(config: BanditConfig = DEFAULT_CONFIG) -> MuscleGroupState:
    """A muscle group state whose actions all hold the configured default prior."""
    prior = ActionPrior(alpha=config.default_alpha, beta=config.default_beta)
    return MuscleGroupState(decrease=prior, maintain=prior, increase=prior)


def group_state_for(
    state: BanditState, muscle_group: str, config: BanditConfig = DEFAULT_CONFIG
) -> MuscleGroupState:
    """Return the stored state for a group, or the default one if unseen."""
    stored = state.muscle_group_states.get(muscle_group)
    return stored if stored is not None else default_group_state(config)


def prior_for(
    state: BanditState,
    muscle_group: str,
    action: VolumeAction,
    config: BanditConfig = DEFAULT_CONFIG,
) -> ActionPrior:
    """The current Beta belief for one (muscle group, action) pair."""
    return group_state_for(state, muscle_group, config).prior_for(action)


def _as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def update_prior(
    prior: ActionPrior, reward: float, config: BanditConfig = DEFAULT_CONFIG
) -> ActionPrior:
    """Apply one reward to a single prior.

    Rewards above 0.5 add to alpha, everything else adds to beta. The amount
    is learning_rate * (1 + magnitude) where magnitude = |reward - 0.5| * 2.
    """
    is_success = reward > SUCCESS_THRESHOLD
    magnitude = abs(reward - SUCCESS_THRESHOLD) * 2.0
    evidence = config.learning_rate * (1.0 + magnitude)

    alpha = prior.alpha + (evidence if is_success else 0.0)
    beta = prior.beta + (0.0 if is_success else evidence)

    return ActionPrior(
        alpha=max(config.prior_floor, alpha * config.decay_rate),
        beta=max(config.prior_floor, beta * config.decay_rate),
    )


def update(
    state: BanditState, bandit_update: BanditUpdate, config: BanditConfig = DEFAULT_CONFIG
) -> BanditState:
    """Fold one observed outcome into the bandit state.

    Reward range is not validated here; calculate_reward() already clamps
    to [0, 1].

    Args:
        state: Current state. Left untouched.
        bandit_update: The (muscle group, action, reward, context) outcome.
        config: Learning rate, decay, floor and history limit.

    Returns:
        A new BanditState with the updated prior, an appended history entry
        (oldest evicted past the limit), incremented total_updates and
        last_update set to the update's timestamp (naive times are taken as
        UTC).
    """
    group = bandit_update.muscle_group
    action = bandit_update.action
    timestamp = _as_utc(bandit_update.timestamp)

    group_state = group_state_for(state, group, config)
    old_prior = group_state.prior_for(action)
    new_prior = update_prior(old_prior, bandit_update.reward, config)

    muscle_group_states = dict(state.muscle_group_states)
    muscle_group_states[group] = group_state.with_prior(action, new_prior)

    entry = HistoryEntry(
        timestamp=timestamp,
        muscle_group=group,
        action=action,
        reward=bandit_update.reward,
        context=bandit_update.context,
    )
    history = (state.history + (entry,))[-config.history_limit:]

    logger.debug(
        "Updated %s/%s with reward %.3f: alpha %.3f->%.3f, beta %.3f->%.3f",
        group,
        action.label,
        bandit_update.reward,
        old_prior.alpha,
        new_prior.alpha,
        old_prior.beta,
        new_prior.beta,
    )

    return dataclasses.replace(
        state,
        muscle_group_states=muscle_group_states,
        total_updates=state.total_updates + 1,
        last_update=timestamp,
        history=history,
    )


def get_action_success_rate(
    state: BanditState,
    muscle_group: str,
    action: VolumeAction,
    config: BanditConfig = DEFAULT_CONFIG,
) -> float:
    """Posterior mean alpha / (alpha + beta); 0.5 for a group never updated."""
    if not state.has_group(muscle_group):
        return 0.5
    return prior_for(state, muscle_group, action, config).mean


def get_exploration_bonus(
    state: BanditState,
    muscle_group: str,
    action: VolumeAction,
    config: BanditConfig = DEFAULT_CONFIG,
) -> float:
    """UCB-style uncertainty bonus that shrinks as evidence accumulates.

    1 / sqrt(1 + observations), where observations is alpha + beta minus
    the two pseudo-counts of a uniform prior. Never-seen groups get 1.0.
    """
    if not state.has_group(muscle_group):
        return 1.0
    prior = prior_for(state, muscle_group, action, config)
    observations = max(0.0, prior.alpha + prior.beta - 2.0)
    return 1.0 / math.sqrt(1.0 + observations)
