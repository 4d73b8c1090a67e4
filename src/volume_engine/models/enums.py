"""Enumerations and tuning constants for the volume engine.

Thresholds and multipliers here are load-bearing: changing them changes which
action the bandit prefers for a given context. BanditConfig exposes the
tunable ones; these values are the defaults.
"""

from enum import IntEnum, auto


class VolumeAction(IntEnum):
    """Categorical volume adjustment for one muscle group.

    Enumeration order matters: exact ties in sampled values go to the
    earliest member.
    """

    DECREASE = auto()
    MAINTAIN = auto()
    INCREASE = auto()

    @property
    def label(self) -> str:
        """Lowercase wire name ("decrease", "maintain", "increase")."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "VolumeAction":
        return cls[label.strip().upper()]


class FatigueLevel(IntEnum):
    LOW = auto()
    MODERATE = auto()
    HIGH = auto()


class RecoveryLevel(IntEnum):
    POOR = auto()
    MODERATE = auto()
    GOOD = auto()


class PerformanceTrend(IntEnum):
    DECLINING = auto()
    STABLE = auto()
    IMPROVING = auto()


ACTIONS: tuple[VolumeAction, ...] = (
    VolumeAction.DECREASE,
    VolumeAction.MAINTAIN,
    VolumeAction.INCREASE,
)

MUSCLE_GROUPS: tuple[str, ...] = (
    "Chest",
    "Back",
    "Legs",
    "Shoulders",
    "Arms",
    "Core",
    "Cardio",
)

# ---------------------------------------------------------------------------
# Posterior constants
# ---------------------------------------------------------------------------
# Mildly optimistic prior: Beta(3, 2) has mean 0.6
DEFAULT_PRIOR_ALPHA = 3.0
DEFAULT_PRIOR_BETA = 2.0

# Evidence added per observation is LEARNING_RATE * (1 + magnitude)
LEARNING_RATE = 0.5

# Multiplicative shrink after every update so recent outcomes dominate
DECAY_RATE = 0.99

# Hard floor on alpha/beta after decay
PRIOR_FLOOR = 1.0

# Rewards strictly above this count as a success
SUCCESS_THRESHOLD = 0.5

HISTORY_LIMIT = 100

# Updates needed before sample confidence saturates at 1.0
MIN_SAMPLES_FOR_CONFIDENCE = 10

# ---------------------------------------------------------------------------
# Confidence blend
# ---------------------------------------------------------------------------
SAMPLE_CONFIDENCE_WEIGHT = 0.4
MARGIN_CONFIDENCE_WEIGHT = 0.3
ALIGNMENT_CONFIDENCE_WEIGHT = 0.3
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95

# ---------------------------------------------------------------------------
# Context classification thresholds
# ---------------------------------------------------------------------------
FATIGUE_HIGH_THRESHOLD = 0.7       # > high
FATIGUE_MODERATE_THRESHOLD = 0.4   # > moderate, else low
RECOVERY_POOR_THRESHOLD = 0.4      # < poor
RECOVERY_MODERATE_THRESHOLD = 0.7  # < moderate, else good
TREND_DECLINING_THRESHOLD = -0.1   # < declining
TREND_IMPROVING_THRESHOLD = 0.1    # > improving, else stable

# Narrative-only thresholds (reasoning text and heuristic alignment)
WELL_RESTED_FATIGUE_THRESHOLD = 0.3
VERY_POOR_RECOVERY_THRESHOLD = 0.3

# ---------------------------------------------------------------------------
# Contextual multipliers over (decrease, maintain, increase)
# ---------------------------------------------------------------------------
FATIGUE_WEIGHTS: dict[FatigueLevel, dict[VolumeAction, float]] = {
    FatigueLevel.HIGH: {
        VolumeAction.DECREASE: 1.5,
        VolumeAction.MAINTAIN: 1.2,
        VolumeAction.INCREASE: 0.5,
    },
    FatigueLevel.MODERATE: {
        VolumeAction.DECREASE: 1.0,
        VolumeAction.MAINTAIN: 1.3,
        VolumeAction.INCREASE: 0.8,
    },
    FatigueLevel.LOW: {
        VolumeAction.DECREASE: 0.7,
        VolumeAction.MAINTAIN: 1.0,
        VolumeAction.INCREASE: 1.4,
    },
}

RECOVERY_WEIGHTS: dict[RecoveryLevel, dict[VolumeAction, float]] = {
    RecoveryLevel.POOR: {
        VolumeAction.DECREASE: 1.6,
        VolumeAction.MAINTAIN: 1.0,
        VolumeAction.INCREASE: 0.4,
    },
    RecoveryLevel.MODERATE: {
        VolumeAction.DECREASE: 1.0,
        VolumeAction.MAINTAIN: 1.2,
        VolumeAction.INCREASE: 0.9,
    },
    RecoveryLevel.GOOD: {
        VolumeAction.DECREASE: 0.6,
        VolumeAction.MAINTAIN: 1.0,
        VolumeAction.INCREASE: 1.5,
    },
}

PERFORMANCE_WEIGHTS: dict[PerformanceTrend, dict[VolumeAction, float]] = {
    PerformanceTrend.DECLINING: {
        VolumeAction.DECREASE: 0.8,
        VolumeAction.MAINTAIN: 1.4,
        VolumeAction.INCREASE: 0.6,
    },
    PerformanceTrend.STABLE: {
        VolumeAction.DECREASE: 0.9,
        VolumeAction.MAINTAIN: 1.3,
        VolumeAction.INCREASE: 1.0,
    },
    PerformanceTrend.IMPROVING: {
        VolumeAction.DECREASE: 0.5,
        VolumeAction.MAINTAIN: 1.0,
        VolumeAction.INCREASE: 1.5,
    },
}

# ---------------------------------------------------------------------------
# Volume mapping (MEV floor / MRV ceiling in weekly sets)
# ---------------------------------------------------------------------------
MIN_WEEKLY_SETS = 6
MAX_WEEKLY_SETS = 30

BASE_SET_CHANGE: dict[VolumeAction, int] = {
    VolumeAction.DECREASE: -2,
    VolumeAction.MAINTAIN: 0,
    VolumeAction.INCREASE: 2,
}

EXTREME_FATIGUE_THRESHOLD = 0.8   # decrease becomes -3 above this
EXTREME_FATIGUE_SET_CHANGE = -3
CAUTIOUS_RECOVERY_THRESHOLD = 0.5  # increase becomes +1 below this
CAUTIOUS_INCREASE_SET_CHANGE = 1
