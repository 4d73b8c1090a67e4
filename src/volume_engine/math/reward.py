"""Reward calculation: multi-factor workout feedback -> scalar in [0, 1].

Starts from a neutral 0.5 and adds one bounded contribution per signal.
Performance change is the primary signal (+/-0.2); difficulty, next-day
soreness and satisfaction each contribute up to +/-0.1.
"""

from __future__ import annotations

from volume_engine.models.recommendation import WorkoutFeedback

NEUTRAL_REWARD = 0.5
PERFORMANCE_WEIGHT = 0.2
SATISFACTION_STEP = 0.05

# Rating 1 ("too easy") is penalized while 5 ("too hard") scores like 3.
# The asymmetry is intentional until the survey scale is recalibrated.
_DIFFICULTY_SCORES: dict[int, float] = {
    4: 0.1,
    3: 0.05,
    5: 0.05,
    2: 0.0,
}
_DIFFICULTY_FALLBACK = -0.05


def difficulty_score(perceived_difficulty: int) -> float:
    """Score a 1-5 perceived difficulty rating; 4 is the sweet spot."""
    return _DIFFICULTY_SCORES.get(perceived_difficulty, _DIFFICULTY_FALLBACK)


def soreness_score(soreness_24h: int) -> float:
    """Score next-day soreness (1-5); low soreness is good."""
    if soreness_24h <= 2:
        return 0.1
    if soreness_24h == 3:
        return 0.05
    if soreness_24h == 4:
        return -0.05
    return -0.1


def calculate_reward(
    performance_change: float,
    perceived_difficulty: int,
    soreness_24h: int | None = None,
    satisfaction: int | None = None,
) -> float:
    """Convert post-workout feedback into a reward for the bandit.

    Args:
        performance_change: -1.0 to 1.0; negative means performance declined.
        perceived_difficulty: 1-5 rating from the post-workout survey.
        soreness_24h: Optional 1-5 soreness from the next-day check-in.
        satisfaction: Optional 1-5 session satisfaction.

    Returns:
        Reward clamped to [0.0, 1.0]. Values above 0.5 count as success.
    """
    reward = NEUTRAL_REWARD
    reward += performance_change * PERFORMANCE_WEIGHT
    reward += difficulty_score(perceived_difficulty)

    if soreness_24h is not None:
        reward += soreness_score(soreness_24h)

    if satisfaction is not None:
        reward += (satisfaction - 3) * SATISFACTION_STEP

    return max(0.0, min(1.0, reward))


def reward_from_feedback(feedback: WorkoutFeedback) -> float:
    """calculate_reward() over a WorkoutFeedback bundle."""
    return calculate_reward(
        feedback.performance_change,
        feedback.perceived_difficulty,
        soreness_24h=feedback.soreness_24h,
        satisfaction=feedback.satisfaction,
    )
