"""JSON persistence for BanditState.

The blob layout mirrors what the mobile client stores on-device and in the
synced profile record::

    {
      "muscleGroupStates": {"Chest": {"increase": {"alpha": 3.4, "beta": 1.98}, ...}},
      "totalUpdates": 12,
      "lastUpdate": "2026-03-02T18:04:11.120000+00:00",
      "history": [
        {"timestamp": "...", "muscleGroup": "Chest", "action": "increase",
         "reward": 0.75, "context": {"fatigueLevel": 0.3, "recoveryScore": 0.8,
                                     "recentPerformanceTrend": 0.05}}
      ]
    }

Timestamps are written as ISO 8601 strings. Numeric epoch-millisecond
timestamps from older blobs are also accepted on read.

All functions are pure (no I/O).
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from volume_engine.bandit.posterior import default_group_state, initialize
from volume_engine.config import DEFAULT_CONFIG, BanditConfig
from volume_engine.exceptions import StateDecodeError
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import ACTIONS, VolumeAction
from volume_engine.models.state import (
    ActionPrior,
    BanditState,
    HistoryEntry,
    MuscleGroupState,
)

logger = logging.getLogger(__name__)

_CONTEXT_KEYS = {
    "fatigueLevel": "fatigue_level",
    "recoveryScore": "recovery_score",
    "recentPerformanceTrend": "recent_performance_trend",
}


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def state_to_dict(state: BanditState) -> dict:
    """Convert a BanditState to a JSON-compatible dict."""
    return {
        "muscleGroupStates": {
            group: {
                action.label: {
                    "alpha": group_state.prior_for(action).alpha,
                    "beta": group_state.prior_for(action).beta,
                }
                for action in ACTIONS
            }
            for group, group_state in state.muscle_group_states.items()
        },
        "totalUpdates": state.total_updates,
        "lastUpdate": state.last_update.isoformat(),
        "history": [
            {
                "timestamp": entry.timestamp.isoformat(),
                "muscleGroup": entry.muscle_group,
                "action": entry.action.label,
                "reward": entry.reward,
                "context": _context_to_dict(entry.context),
            }
            for entry in state.history
        ],
    }


def serialize(state: BanditState) -> str:
    """Encode a BanditState as a JSON string for the host to store."""
    return json.dumps(state_to_dict(state))


def _context_to_dict(context: BanditContext) -> dict:
    data = dict(context.extras)
    data["fatigueLevel"] = context.fatigue_level
    data["recoveryScore"] = context.recovery_score
    data["recentPerformanceTrend"] = context.recent_performance_trend
    return data


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def state_from_dict(
    data: Any, now: datetime | None = None, config: BanditConfig = DEFAULT_CONFIG
) -> BanditState:
    """Strictly decode a parsed blob.

    Missing or null top-level keys fall back to their defaults one by one;
    anything present but malformed is an error, including a prior below
    ``config.prior_floor`` or any non-finite number. Groups missing an
    action get the configured default prior for it.

    Raises:
        StateDecodeError: The blob is not an object or a field is malformed.
    """
    if not isinstance(data, dict):
        raise StateDecodeError(f"expected a JSON object, got {type(data).__name__}")

    try:
        raw_groups = data.get("muscleGroupStates") or {}
        raw_total = data.get("totalUpdates") or 0
        raw_last = data.get("lastUpdate")
        raw_history = data.get("history") or []

        if not isinstance(raw_groups, dict):
            raise StateDecodeError("muscleGroupStates must be an object")
        if not isinstance(raw_history, list):
            raise StateDecodeError("history must be an array")
        if isinstance(raw_total, bool) or not isinstance(raw_total, (int, float)):
            raise StateDecodeError("totalUpdates must be a number")

        return BanditState(
            muscle_group_states={
                str(group): _group_state_from_dict(raw, config)
                for group, raw in raw_groups.items()
            },
            total_updates=int(raw_total),
            last_update=(
                _parse_timestamp(raw_last)
                if raw_last
                else now or datetime.now(timezone.utc)
            ),
            history=tuple(_history_entry_from_dict(raw) for raw in raw_history),
        )
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
        raise StateDecodeError(f"malformed bandit state: {exc}") from exc


def deserialize(
    text: str | bytes | None, config: BanditConfig = DEFAULT_CONFIG
) -> BanditState:
    """Decode a stored blob, failing open to a fresh state.

    A corrupted blob must never block the training flow, so any decode
    failure is logged and replaced by ``initialize()``.
    """
    if not text:
        return initialize()
    try:
        return state_from_dict(json.loads(text), config=config)
    except (ValueError, TypeError, RecursionError, StateDecodeError) as exc:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.warning("Discarding unreadable bandit state, starting fresh: %s", exc)
        return initialize()


def _group_state_from_dict(raw: dict, config: BanditConfig) -> MuscleGroupState:
    if not isinstance(raw, dict):
        raise StateDecodeError("muscle group state must be an object")
    group_state = default_group_state(config)
    for action in ACTIONS:
        raw_prior = raw.get(action.label)
        if raw_prior is None:
            continue
        group_state = group_state.with_prior(
            action,
            ActionPrior(
                alpha=_prior_parameter(raw_prior["alpha"], config),
                beta=_prior_parameter(raw_prior["beta"], config),
            ),
        )
    return group_state


def _history_entry_from_dict(raw: dict) -> HistoryEntry:
    if not isinstance(raw, dict):
        raise StateDecodeError("history entry must be an object")
    return HistoryEntry(
        timestamp=_parse_timestamp(raw["timestamp"]),
        muscle_group=str(raw["muscleGroup"]),
        action=VolumeAction.from_label(raw["action"]),
        reward=_number(raw["reward"]),
        context=_context_from_dict(raw.get("context") or {}),
    )


def _context_from_dict(raw: dict) -> BanditContext:
    if not isinstance(raw, dict):
        raise StateDecodeError("context must be an object")
    extras = {k: v for k, v in raw.items() if k not in _CONTEXT_KEYS}
    values = {field: _number(raw.get(key, 0.0)) for key, field in _CONTEXT_KEYS.items()}
    return BanditContext(extras=extras, **values)


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StateDecodeError(f"expected a number, got {value!r}")
    number = float(value)
    # json.loads() accepts NaN and Infinity literals
    if not math.isfinite(number):
        raise StateDecodeError(f"expected a finite number, got {value!r}")
    return number


def _prior_parameter(value: Any, config: BanditConfig) -> float:
    number = _number(value)
    if number < config.prior_floor:
        raise StateDecodeError(
            f"prior parameter {number} is below the floor of {config.prior_floor}"
        )
    return number


def _parse_timestamp(value: Any) -> datetime:
    """Accept ISO 8601 strings or epoch milliseconds. Naive times are UTC."""
    if isinstance(value, str):
        # fromisoformat() only understands a trailing "Z" from 3.11 on
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return datetime.fromtimestamp(_number(value) / 1000.0, tz=timezone.utc)
