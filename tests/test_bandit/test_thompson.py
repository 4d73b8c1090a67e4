"""Tests for contextual Thompson-sampling recommendations."""

from __future__ import annotations

import random
from collections import Counter
from typing import Callable

import pytest

from volume_engine.bandit.posterior import update
from volume_engine.bandit.thompson import (
    build_reasoning,
    compute_confidence,
    heuristic_alignment,
    recommend,
    select_action,
)
from volume_engine.config import BanditConfig
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import ACTIONS, VolumeAction
from volume_engine.models.recommendation import BanditUpdate
from volume_engine.models.state import BanditState


class TestSelectAction:
    def test_argmax(self) -> None:
        sampled = {
            VolumeAction.DECREASE: 0.2,
            VolumeAction.MAINTAIN: 0.7,
            VolumeAction.INCREASE: 0.5,
        }
        assert select_action(sampled) == VolumeAction.MAINTAIN

    def test_exact_tie_goes_to_earliest_action(self) -> None:
        assert select_action({a: 0.5 for a in ACTIONS}) == VolumeAction.DECREASE
        tie = {VolumeAction.DECREASE: 0.1, VolumeAction.MAINTAIN: 0.6, VolumeAction.INCREASE: 0.6}
        assert select_action(tie) == VolumeAction.MAINTAIN


class TestHeuristicAlignment:
    def test_neutral(self, neutral_context: BanditContext) -> None:
        for action in ACTIONS:
            assert heuristic_alignment(action, neutral_context) == 0.5

    def test_exhausted_context(self, exhausted_context: BanditContext) -> None:
        # +0.3 fatigue, +0.2 declining
        assert heuristic_alignment(VolumeAction.DECREASE, exhausted_context) == pytest.approx(1.0)
        # -0.3 fatigue, -0.3 very poor recovery, -0.2 declining, clamped
        assert heuristic_alignment(VolumeAction.INCREASE, exhausted_context) == 0.0
        assert heuristic_alignment(VolumeAction.MAINTAIN, exhausted_context) == 0.5

    def test_good_recovery_supports_increase(self, fresh_context: BanditContext) -> None:
        assert heuristic_alignment(VolumeAction.INCREASE, fresh_context) == pytest.approx(0.7)

    def test_uses_configured_thresholds(self) -> None:
        context = BanditContext(
            fatigue_level=0.6, recovery_score=0.65, recent_performance_trend=-0.05
        )
        config = BanditConfig(fatigue_high=0.5, recovery_moderate=0.6, trend_declining=0.0)
        assert heuristic_alignment(VolumeAction.DECREASE, context) == 0.5
        # +0.3 fatigue, +0.2 declining
        assert heuristic_alignment(VolumeAction.DECREASE, context, config) == pytest.approx(1.0)
        # -0.3 fatigue, +0.2 recovery, -0.2 declining
        assert heuristic_alignment(VolumeAction.INCREASE, context, config) == pytest.approx(0.2)


class TestConfidence:
    def test_formula(self, neutral_context: BanditContext) -> None:
        sampled = {
            VolumeAction.DECREASE: 0.3,
            VolumeAction.MAINTAIN: 0.8,
            VolumeAction.INCREASE: 0.6,
        }
        confidence = compute_confidence(VolumeAction.MAINTAIN, neutral_context, sampled, 5)
        expected = 0.4 * 0.5 + 0.3 * (0.8 - 0.6) + 0.3 * 0.5
        assert confidence == pytest.approx(expected)

    def test_clamped_low(self, exhausted_context: BanditContext) -> None:
        sampled = {a: 0.4 for a in ACTIONS}
        assert compute_confidence(VolumeAction.INCREASE, exhausted_context, sampled, 0) == 0.1

    def test_clamped_high(self, exhausted_context: BanditContext) -> None:
        sampled = {
            VolumeAction.DECREASE: 0.99,
            VolumeAction.MAINTAIN: 0.01,
            VolumeAction.INCREASE: 0.01,
        }
        confidence = compute_confidence(VolumeAction.DECREASE, exhausted_context, sampled, 500)
        assert confidence == 0.95


class TestReasoning:
    def test_exhausted_and_new(self, exhausted_context: BanditContext) -> None:
        text = build_reasoning(VolumeAction.DECREASE, exhausted_context, 3)
        assert text.startswith("Reduce volume.")
        assert "Fatigue levels are high." in text
        assert "Recovery appears incomplete." in text
        assert "Recent performance declining." in text
        assert text.endswith("(Based on 3 observations - still learning your patterns.)")

    def test_fresh_and_experienced(self, fresh_context: BanditContext) -> None:
        text = build_reasoning(VolumeAction.INCREASE, fresh_context, 42)
        assert text.startswith("Increase volume.")
        assert "Well-rested state." in text
        assert "Excellent recovery observed." in text
        assert "Performance trending upward." in text
        assert text.endswith("(Based on 42 observations of your training response.)")

    def test_neutral_has_no_remarks(self, neutral_context: BanditContext) -> None:
        text = build_reasoning(VolumeAction.MAINTAIN, neutral_context, 10)
        assert text == (
            "Maintain current volume. (Based on 10 observations of your training response.)"
        )

    def test_agrees_with_classification_under_overrides(
        self, empty_state: BanditState, rng: random.Random
    ) -> None:
        context = BanditContext(
            fatigue_level=0.65, recovery_score=0.45, recent_performance_trend=-0.05
        )
        config = BanditConfig(fatigue_high=0.6, recovery_poor=0.5, trend_declining=0.0)
        rec = recommend(context, empty_state, "Chest", config, rng)
        assert rec.contextual_adjustments == (
            "Fatigue: high (65%)",
            "Recovery: poor (45%)",
            "Performance: declining (-5.0%)",
        )
        assert "Fatigue levels are high." in rec.reasoning
        assert "Recovery appears incomplete." in rec.reasoning
        assert "Recent performance declining." in rec.reasoning


class TestRecommend:
    def test_output_shape(
        self, neutral_context: BanditContext, empty_state: BanditState, rng: random.Random
    ) -> None:
        rec = recommend(neutral_context, empty_state, "Chest", rng=rng)
        assert rec.action in ACTIONS
        assert 0.1 <= rec.confidence <= 0.95
        assert set(rec.sampled_values) == set(ACTIONS)
        assert all(0.0 < v < 1.0 for v in rec.sampled_values.values())
        assert rec.sampled_values[rec.action] == max(rec.sampled_values.values())
        assert len(rec.contextual_adjustments) == 3
        assert rec.reasoning

    def test_does_not_touch_state(
        self, neutral_context: BanditContext, trained_state: BanditState, rng: random.Random
    ) -> None:
        before_groups = dict(trained_state.muscle_group_states)
        before_updates = trained_state.total_updates
        recommend(neutral_context, trained_state, "Chest", rng=rng)
        assert trained_state.muscle_group_states == before_groups
        assert trained_state.total_updates == before_updates

    def test_seeded_rng_is_reproducible(
        self, exhausted_context: BanditContext, trained_state: BanditState
    ) -> None:
        first = recommend(exhausted_context, trained_state, "Back", rng=random.Random(3))
        second = recommend(exhausted_context, trained_state, "Back", rng=random.Random(3))
        assert first == second

    def test_contextual_bias_toward_decrease(
        self, exhausted_context: BanditContext, empty_state: BanditState, rng: random.Random
    ) -> None:
        trials = 5_000
        counts = Counter(
            recommend(exhausted_context, empty_state, "Chest", rng=rng).action
            for _ in range(trials)
        )
        decrease_share = counts[VolumeAction.DECREASE] / trials
        increase_share = counts[VolumeAction.INCREASE] / trials
        # Maintain is a close second under these weights, increase is rare
        assert decrease_share > 0.42
        assert decrease_share > counts[VolumeAction.MAINTAIN] / trials
        assert increase_share < 0.1
        # Still a stochastic choice, not a deterministic rule
        assert len(counts) >= 2

    def test_contextual_bias_toward_increase(
        self, fresh_context: BanditContext, empty_state: BanditState, rng: random.Random
    ) -> None:
        counts = Counter(
            recommend(fresh_context, empty_state, "Chest", rng=rng).action
            for _ in range(1_000)
        )
        assert counts.most_common(1)[0][0] == VolumeAction.INCREASE
        assert counts[VolumeAction.INCREASE] / 1_000 > 0.6

    def test_learned_failures_suppress_action(
        self,
        fresh_context: BanditContext,
        empty_state: BanditState,
        make_update: Callable[..., BanditUpdate],
        rng: random.Random,
    ) -> None:
        state = empty_state
        for i in range(30):
            state = update(state, make_update(reward=0.0, action=VolumeAction.INCREASE, minutes=i))
        counts = Counter(
            recommend(fresh_context, state, "Chest", rng=rng).action for _ in range(1_000)
        )
        assert counts[VolumeAction.INCREASE] / 1_000 < 0.2

    def test_sample_confidence_grows_with_updates(
        self, neutral_context: BanditContext, trained_state: BanditState, empty_state: BanditState
    ) -> None:
        def mean_confidence(state: BanditState) -> float:
            rng = random.Random(11)
            recs = [recommend(neutral_context, state, "Chest", rng=rng) for _ in range(300)]
            return sum(r.confidence for r in recs) / len(recs)

        assert mean_confidence(trained_state) > mean_confidence(empty_state)

    @pytest.mark.parametrize(
        "fatigue,recovery,trend",
        [(0.0, 0.0, -1.0), (1.0, 1.0, 1.0), (1.5, -0.5, 3.0), (-2.0, 4.0, -7.0)],
    )
    def test_total_over_finite_contexts(
        self,
        fatigue: float,
        recovery: float,
        trend: float,
        trained_state: BanditState,
        rng: random.Random,
    ) -> None:
        context = BanditContext(
            fatigue_level=fatigue, recovery_score=recovery, recent_performance_trend=trend
        )
        rec = recommend(context, trained_state, "Shoulders", rng=rng)
        assert 0.1 <= rec.confidence <= 0.95
