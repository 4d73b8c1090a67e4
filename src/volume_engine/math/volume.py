"""Volume mapping: categorical action -> bounded change in weekly sets.

Set counts are bounded by an MEV-style floor and an MRV-style ceiling
(Israetel et al., Scientific Principles of Hypertrophy Training).
"""

from __future__ import annotations

from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import (
    BASE_SET_CHANGE,
    CAUTIOUS_INCREASE_SET_CHANGE,
    CAUTIOUS_RECOVERY_THRESHOLD,
    EXTREME_FATIGUE_SET_CHANGE,
    EXTREME_FATIGUE_THRESHOLD,
    VolumeAction,
)
from volume_engine.models.recommendation import VolumeChange


def nominal_set_change(action: VolumeAction, context: BanditContext) -> int:
    """Step size for an action before clamping.

    Extreme fatigue deepens a decrease; questionable recovery softens an
    increase.
    """
    change = BASE_SET_CHANGE[action]
    if action == VolumeAction.DECREASE and context.fatigue_level > EXTREME_FATIGUE_THRESHOLD:
        change = EXTREME_FATIGUE_SET_CHANGE
    if action == VolumeAction.INCREASE and context.recovery_score < CAUTIOUS_RECOVERY_THRESHOLD:
        change = CAUTIOUS_INCREASE_SET_CHANGE
    return change


def describe_set_change(change: int) -> str:
    if change == 0:
        return "Keep current volume"
    if change > 0:
        return f"Add {change} sets"
    return f"Remove {abs(change)} sets"


def action_to_volume_change(
    action: VolumeAction,
    current_sets: int,
    context: BanditContext,
    config: BanditConfig = DEFAULT_CONFIG,
) -> VolumeChange:
    """Convert a bandit action into a concrete new set count.

    Args:
        action: The chosen VolumeAction.
        current_sets: Current weekly sets for the muscle group.
        context: Context the action was chosen under.
        config: Supplies the set floor and ceiling.

    Returns:
        VolumeChange whose ``change`` is the delta after clamping. A trainee
        below the floor who is told to decrease still moves up to the floor.
    """
    change = nominal_set_change(action, context)
    new_sets = max(config.min_sets, min(config.max_sets, current_sets + change))
    actual_change = new_sets - current_sets
    return VolumeChange(
        new_sets=new_sets,
        change=actual_change,
        description=describe_set_change(actual_change),
    )
