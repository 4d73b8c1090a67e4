"""Tunable engine configuration with environment-variable overrides.

Defaults come from models/enums.py. Every VOLUME_BANDIT_* variable is
optional; unset variables keep the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

from volume_engine.exceptions import ConfigError
from volume_engine.models.enums import (
    DECAY_RATE,
    DEFAULT_PRIOR_ALPHA,
    DEFAULT_PRIOR_BETA,
    FATIGUE_HIGH_THRESHOLD,
    FATIGUE_MODERATE_THRESHOLD,
    HISTORY_LIMIT,
    LEARNING_RATE,
    MAX_WEEKLY_SETS,
    MIN_SAMPLES_FOR_CONFIDENCE,
    MIN_WEEKLY_SETS,
    PRIOR_FLOOR,
    RECOVERY_MODERATE_THRESHOLD,
    RECOVERY_POOR_THRESHOLD,
    TREND_DECLINING_THRESHOLD,
    TREND_IMPROVING_THRESHOLD,
)

ENV_PREFIX = "VOLUME_BANDIT_"

STATE_PATH: Path = Path(
    os.environ.get("VOLUME_BANDIT_STATE_PATH", "~/.volume_engine/state.json")
).expanduser()


@dataclass(frozen=True)
class BanditConfig:
    """Numeric knobs for learning, classification and volume mapping."""

    learning_rate: float = LEARNING_RATE
    decay_rate: float = DECAY_RATE
    prior_floor: float = PRIOR_FLOOR
    default_alpha: float = DEFAULT_PRIOR_ALPHA
    default_beta: float = DEFAULT_PRIOR_BETA
    history_limit: int = HISTORY_LIMIT
    min_samples_for_confidence: int = MIN_SAMPLES_FOR_CONFIDENCE

    fatigue_high: float = FATIGUE_HIGH_THRESHOLD
    fatigue_moderate: float = FATIGUE_MODERATE_THRESHOLD
    recovery_poor: float = RECOVERY_POOR_THRESHOLD
    recovery_moderate: float = RECOVERY_MODERATE_THRESHOLD
    trend_declining: float = TREND_DECLINING_THRESHOLD
    trend_improving: float = TREND_IMPROVING_THRESHOLD

    min_sets: int = MIN_WEEKLY_SETS
    max_sets: int = MAX_WEEKLY_SETS

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> BanditConfig:
        """Build a config from VOLUME_BANDIT_<FIELD> variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests).

        Raises:
            ConfigError: A variable is set but is not a valid number, or the
                resulting config is inconsistent.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, float | int] = {}
        for f in fields(cls):
            variable = ENV_PREFIX + f.name.upper()
            raw = env.get(variable)
            if raw is None or raw.strip() == "":
                continue
            caster = int if f.type in ("int", int) else float
            try:
                overrides[f.name] = caster(raw)
            except ValueError as exc:
                raise ConfigError(variable, raw, f"expected {caster.__name__}") from exc

        config = cls(**overrides)
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError if the settings cannot produce valid posteriors."""
        if self.prior_floor <= 0:
            raise ConfigError(ENV_PREFIX + "PRIOR_FLOOR", str(self.prior_floor), "must be > 0")
        if not 0 < self.decay_rate <= 1:
            raise ConfigError(ENV_PREFIX + "DECAY_RATE", str(self.decay_rate), "must be in (0, 1]")
        if self.history_limit < 1:
            raise ConfigError(ENV_PREFIX + "HISTORY_LIMIT", str(self.history_limit), "must be >= 1")
        if self.min_samples_for_confidence < 1:
            raise ConfigError(
                ENV_PREFIX + "MIN_SAMPLES_FOR_CONFIDENCE",
                str(self.min_samples_for_confidence),
                "must be >= 1",
            )
        if self.min_sets > self.max_sets:
            raise ConfigError(
                ENV_PREFIX + "MIN_SETS", str(self.min_sets), f"exceeds max_sets={self.max_sets}"
            )


DEFAULT_CONFIG = BanditConfig()
