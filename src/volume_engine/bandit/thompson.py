"""Recommendation engine: contextual Thompson Sampling over volume actions.

For each action the stored Beta posterior is reweighted by the context
(alpha scaled up, beta scaled down by the combined weight), one value is
sampled, and the action with the highest draw wins. Confidence blends how
much data the bandit has seen, how decisive the draw was and whether the
pick agrees with rule-of-thumb coaching heuristics.
"""

from __future__ import annotations

import logging
import random

from volume_engine.bandit.posterior import group_state_for
from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.math.context_weights import (
    classify_context,
    combined_weight,
    describe_context,
)
from volume_engine.math.sampling import sample_beta
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import (
    ACTIONS,
    ALIGNMENT_CONFIDENCE_WEIGHT,
    MARGIN_CONFIDENCE_WEIGHT,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    SAMPLE_CONFIDENCE_WEIGHT,
    VERY_POOR_RECOVERY_THRESHOLD,
    WELL_RESTED_FATIGUE_THRESHOLD,
    VolumeAction,
)
from volume_engine.models.recommendation import BanditRecommendation
from volume_engine.models.state import BanditState

logger = logging.getLogger(__name__)

_ACTION_LABELS: dict[VolumeAction, str] = {
    VolumeAction.DECREASE: "Reduce volume",
    VolumeAction.MAINTAIN: "Maintain current volume",
    VolumeAction.INCREASE: "Increase volume",
}


def sample_actions(
    context: BanditContext,
    state: BanditState,
    muscle_group: str,
    config: BanditConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> dict[VolumeAction, float]:
    """Draw one contextually reweighted posterior sample per action."""
    levels = classify_context(context, config)
    group_state = group_state_for(state, muscle_group, config)

    sampled: dict[VolumeAction, float] = {}
    for action in ACTIONS:
        prior = group_state.prior_for(action)
        weight = combined_weight(levels, action)
        adjusted_alpha = max(config.prior_floor, prior.alpha * weight)
        adjusted_beta = max(config.prior_floor, prior.beta / weight)
        sampled[action] = sample_beta(adjusted_alpha, adjusted_beta, rng)
    return sampled


def select_action(sampled: dict[VolumeAction, float]) -> VolumeAction:
    """Argmax over sampled values; exact ties go to the earliest action."""
    best_action = ACTIONS[0]
    best_value = float("-inf")
    for action in ACTIONS:
        # Strict comparison keeps the first action on a tie
        if sampled[action] > best_value:
            best_value = sampled[action]
            best_action = action
    return best_action


def heuristic_alignment(
    action: VolumeAction, context: BanditContext, config: BanditConfig = DEFAULT_CONFIG
) -> float:
    """How well an action agrees with obvious coaching heuristics, in [0, 1].

    0.5 is neutral. High fatigue favours decreasing, good recovery favours
    increasing, declining performance argues against adding volume.
    """
    alignment = 0.5

    if context.fatigue_level > config.fatigue_high:
        if action == VolumeAction.DECREASE:
            alignment += 0.3
        elif action == VolumeAction.INCREASE:
            alignment -= 0.3

    if action == VolumeAction.INCREASE:
        if context.recovery_score > config.recovery_moderate:
            alignment += 0.2
        if context.recovery_score < VERY_POOR_RECOVERY_THRESHOLD:
            alignment -= 0.3

    if context.recent_performance_trend < config.trend_declining:
        if action == VolumeAction.DECREASE:
            alignment += 0.2
        elif action == VolumeAction.INCREASE:
            alignment -= 0.2

    return max(0.0, min(1.0, alignment))


def compute_confidence(
    action: VolumeAction,
    context: BanditContext,
    sampled: dict[VolumeAction, float],
    total_updates: int,
    config: BanditConfig = DEFAULT_CONFIG,
) -> float:
    """Blend sample-size, margin and heuristic confidence, clamped to [0.1, 0.95]."""
    sample_confidence = min(1.0, total_updates / config.min_samples_for_confidence)

    ranked = sorted(sampled.values(), reverse=True)
    margin_confidence = ranked[0] - ranked[1] if len(ranked) > 1 else ranked[0]

    confidence = (
        SAMPLE_CONFIDENCE_WEIGHT * sample_confidence
        + MARGIN_CONFIDENCE_WEIGHT * margin_confidence
        + ALIGNMENT_CONFIDENCE_WEIGHT * heuristic_alignment(action, context, config)
    )
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))


def build_reasoning(
    action: VolumeAction,
    context: BanditContext,
    total_updates: int,
    config: BanditConfig = DEFAULT_CONFIG,
) -> str:
    """Templated explanation: the action, one remark per dimension, a data caveat."""
    parts = [f"{_ACTION_LABELS[action]}."]

    if context.fatigue_level > config.fatigue_high:
        parts.append("Fatigue levels are high.")
    elif context.fatigue_level < WELL_RESTED_FATIGUE_THRESHOLD:
        parts.append("Well-rested state.")

    if context.recovery_score < config.recovery_poor:
        parts.append("Recovery appears incomplete.")
    elif context.recovery_score > config.recovery_moderate:
        parts.append("Excellent recovery observed.")

    if context.recent_performance_trend < config.trend_declining:
        parts.append("Recent performance declining.")
    elif context.recent_performance_trend > config.trend_improving:
        parts.append("Performance trending upward.")

    if total_updates < config.min_samples_for_confidence:
        parts.append(
            f"(Based on {total_updates} observations - still learning your patterns.)"
        )
    else:
        parts.append(f"(Based on {total_updates} observations of your training response.)")

    return " ".join(parts)


def recommend(
    context: BanditContext,
    state: BanditState,
    muscle_group: str,
    config: BanditConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> BanditRecommendation:
    """Recommend decrease / maintain / increase for one muscle group.

    Args:
        context: Normalized context for today.
        state: Current bandit state (read only).
        muscle_group: Target group; unseen groups use the default prior.
        config: Thresholds and priors.
        rng: Random source for the Thompson draws.

    Returns:
        A BanditRecommendation carrying the raw samples and explanation.
    """
    levels = classify_context(context, config)
    sampled = sample_actions(context, state, muscle_group, config, rng)
    action = select_action(sampled)
    total_updates = max(0, state.total_updates)

    recommendation = BanditRecommendation(
        action=action,
        confidence=compute_confidence(action, context, sampled, total_updates, config),
        reasoning=build_reasoning(action, context, total_updates, config),
        sampled_values=sampled,
        contextual_adjustments=describe_context(context, levels),
    )

    logger.debug(
        "Recommended %s for %s (confidence %.2f, samples %s)",
        action.label,
        muscle_group,
        recommendation.confidence,
        {a.label: round(v, 3) for a, v in sampled.items()},
    )
    return recommendation
