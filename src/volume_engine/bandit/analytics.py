"""History analytics: tabular views of what the bandit has observed.

Dashboards plot reward trends per muscle group and action; these helpers
turn the bounded history log into pandas structures for that. Read-only
over a BanditState.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from volume_engine.models.enums import SUCCESS_THRESHOLD, VolumeAction
from volume_engine.models.state import BanditState

HISTORY_COLUMNS = [
    "timestamp",
    "muscle_group",
    "action",
    "reward",
    "fatigue_level",
    "recovery_score",
    "recent_performance_trend",
]

SUMMARY_COLUMNS = ["muscle_group", "action", "count", "mean_reward", "success_rate"]


def history_frame(state: BanditState) -> pd.DataFrame:
    """One row per history entry, oldest first."""
    rows = [
        {
            "timestamp": entry.timestamp,
            "muscle_group": entry.muscle_group,
            "action": entry.action.label,
            "reward": entry.reward,
            "fatigue_level": entry.context.fatigue_level,
            "recovery_score": entry.context.recovery_score,
            "recent_performance_trend": entry.context.recent_performance_trend,
        }
        for entry in state.history
    ]
    frame = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    frame["reward"] = frame["reward"].astype(np.float64)
    return frame


def reward_ewma(
    state: BanditState, muscle_group: str, action: VolumeAction, span: int = 7
) -> float:
    """Most recent EWMA of rewards for one (muscle group, action) series.

    Args:
        state: Bandit state whose history is read.
        muscle_group: Series muscle group.
        action: Series action.
        span: EWMA span in observations.

    Returns:
        The latest smoothed reward, or 0.0 if the series is empty.
    """
    frame = history_frame(state)
    mask = (frame["muscle_group"] == muscle_group) & (frame["action"] == action.label)
    rewards = frame.loc[mask, "reward"]
    if rewards.empty:
        return 0.0
    ewma = rewards.ewm(span=span, adjust=False).mean()
    return float(ewma.iloc[-1])


def action_summary(state: BanditState) -> pd.DataFrame:
    """Observation count, mean reward and success rate per (group, action)."""
    frame = history_frame(state)
    if frame.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    frame["success"] = np.where(frame["reward"] > SUCCESS_THRESHOLD, 1.0, 0.0)
    summary = (
        frame.groupby(["muscle_group", "action"], sort=True)
        .agg(
            count=("reward", "size"),
            mean_reward=("reward", "mean"),
            success_rate=("success", "mean"),
        )
        .reset_index()
    )
    return summary[SUMMARY_COLUMNS]
