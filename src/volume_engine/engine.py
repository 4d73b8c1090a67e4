"""VolumeEngine: orchestrates recommendation, learning and persistence."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone

from volume_engine.bandit.posterior import initialize, update
from volume_engine.bandit.thompson import recommend
from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.math.reward import reward_from_feedback
from volume_engine.math.volume import action_to_volume_change
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import VolumeAction
from volume_engine.models.recommendation import (
    BanditRecommendation,
    BanditUpdate,
    VolumeChange,
    WorkoutFeedback,
)
from volume_engine.models.state import BanditState
from volume_engine.serialization import deserialize, serialize

logger = logging.getLogger(__name__)


class VolumeEngine:
    """Ties the bandit pieces together behind one object.

    The engine holds configuration and a random source, never state. Every
    call takes the previous BanditState and, where it learns, returns the
    next one; the host decides where snapshots live.

    Usage:
        engine = VolumeEngine(rng=random.Random(7))
        state = engine.initialize()
        rec, change = engine.plan_volume(context, state, "Chest", current_sets=12)
        state = engine.record_feedback(state, "Chest", rec.action, context, feedback)
    """

    def __init__(
        self,
        config: BanditConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.rng = rng

    def initialize(self) -> BanditState:
        return initialize()

    def recommend(
        self, context: BanditContext, state: BanditState, muscle_group: str
    ) -> BanditRecommendation:
        """Thompson-sample an action for one muscle group."""
        return recommend(context, state, muscle_group, self.config, self.rng)

    def update(self, state: BanditState, bandit_update: BanditUpdate) -> BanditState:
        """Fold an observed reward into a new state snapshot."""
        return update(state, bandit_update, self.config)

    def record_feedback(
        self,
        state: BanditState,
        muscle_group: str,
        action: VolumeAction,
        context: BanditContext,
        feedback: WorkoutFeedback,
        timestamp: datetime | None = None,
    ) -> BanditState:
        """Score workout feedback and apply it in one step.

        Args:
            state: Current state snapshot.
            muscle_group: Group the action was applied to.
            action: Action that was actually followed.
            context: Context the action was chosen under.
            feedback: Post-workout / next-day feedback.
            timestamp: When the outcome was observed. Defaults to now (UTC).

        Returns:
            The next state snapshot.
        """
        reward = reward_from_feedback(feedback)
        logger.info(
            "Feedback for %s/%s scored reward %.3f", muscle_group, action.label, reward
        )
        return self.update(
            state,
            BanditUpdate(
                action=action,
                context=context,
                reward=reward,
                muscle_group=muscle_group,
                timestamp=timestamp or datetime.now(timezone.utc),
            ),
        )

    def plan_volume(
        self,
        context: BanditContext,
        state: BanditState,
        muscle_group: str,
        current_sets: int,
    ) -> tuple[BanditRecommendation, VolumeChange]:
        """Recommend an action and translate it into a bounded set count."""
        recommendation = self.recommend(context, state, muscle_group)
        change = action_to_volume_change(
            recommendation.action, current_sets, context, self.config
        )
        logger.info(
            "%s: %s (%d -> %d sets, confidence %.2f)",
            muscle_group,
            change.description,
            current_sets,
            change.new_sets,
            recommendation.confidence,
        )
        return recommendation, change

    @staticmethod
    def serialize(state: BanditState) -> str:
        return serialize(state)

    def deserialize(self, text: str | bytes | None) -> BanditState:
        """Decode a stored blob against this engine's prior floor and defaults."""
        return deserialize(text, self.config)
