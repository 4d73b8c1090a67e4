"""Shared test fixtures: contexts, seeded random sources and trained states."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from volume_engine.bandit.posterior import initialize, update
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import VolumeAction
from volume_engine.models.recommendation import BanditUpdate
from volume_engine.models.state import BanditState

BASE_TIME = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def exhausted_context() -> BanditContext:
    """High fatigue, poor recovery, declining performance."""
    return BanditContext(
        fatigue_level=0.9,
        recovery_score=0.2,
        recent_performance_trend=-0.3,
    )


@pytest.fixture
def fresh_context() -> BanditContext:
    """Low fatigue, good recovery, improving performance."""
    return BanditContext(
        fatigue_level=0.2,
        recovery_score=0.85,
        recent_performance_trend=0.25,
    )


@pytest.fixture
def neutral_context() -> BanditContext:
    """Moderate on every dimension, with auxiliary pipeline fields."""
    return BanditContext(
        fatigue_level=0.5,
        recovery_score=0.55,
        recent_performance_trend=0.0,
        extras={"avgSoreness7d": 2.4, "weeksSinceDeload": 3},
    )


@pytest.fixture
def empty_state() -> BanditState:
    return initialize(now=BASE_TIME)


@pytest.fixture
def make_update() -> Callable[..., BanditUpdate]:
    """Factory for BanditUpdate with sensible defaults."""

    def _make(
        reward: float = 1.0,
        muscle_group: str = "Chest",
        action: VolumeAction = VolumeAction.INCREASE,
        minutes: int = 0,
        context: BanditContext | None = None,
    ) -> BanditUpdate:
        return BanditUpdate(
            action=action,
            context=context
            or BanditContext(fatigue_level=0.3, recovery_score=0.8, recent_performance_trend=0.05),
            reward=reward,
            muscle_group=muscle_group,
            timestamp=BASE_TIME + timedelta(minutes=minutes),
        )

    return _make


@pytest.fixture
def trained_state(
    empty_state: BanditState, make_update: Callable[..., BanditUpdate]
) -> BanditState:
    """Twelve mixed outcomes across two muscle groups."""
    state = empty_state
    outcomes = [
        ("Chest", VolumeAction.INCREASE, 0.8),
        ("Chest", VolumeAction.INCREASE, 0.7),
        ("Chest", VolumeAction.MAINTAIN, 0.55),
        ("Chest", VolumeAction.DECREASE, 0.3),
        ("Back", VolumeAction.MAINTAIN, 0.6),
        ("Back", VolumeAction.INCREASE, 0.2),
        ("Back", VolumeAction.INCREASE, 0.35),
        ("Chest", VolumeAction.INCREASE, 0.9),
        ("Back", VolumeAction.DECREASE, 0.65),
        ("Chest", VolumeAction.MAINTAIN, 0.5),
        ("Back", VolumeAction.MAINTAIN, 0.75),
        ("Chest", VolumeAction.INCREASE, 0.85),
    ]
    for i, (group, action, reward) in enumerate(outcomes):
        state = update(
            state, make_update(reward=reward, muscle_group=group, action=action, minutes=i)
        )
    return state
