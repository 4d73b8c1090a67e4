"""Command-line host for the volume engine.

Keeps a bandit state file on disk and drives the engine against it. All file
I/O lives here; the engine itself stays pure.

Usage:
    volume-engine init
    volume-engine recommend --group Chest --fatigue 0.9 --recovery 0.2 --trend -0.3 --sets 14
    volume-engine feedback --group Chest --action decrease --fatigue 0.9 --recovery 0.2 \
        --trend -0.3 --performance-change 0.1 --difficulty 4 --soreness 2
    volume-engine summary
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from volume_engine.bandit.analytics import action_summary
from volume_engine.bandit.posterior import get_action_success_rate
from volume_engine.config import STATE_PATH, BanditConfig
from volume_engine.engine import VolumeEngine
from volume_engine.exceptions import ConfigError
from volume_engine.models.context import BanditContext
from volume_engine.models.enums import ACTIONS, VolumeAction
from volume_engine.models.recommendation import WorkoutFeedback
from volume_engine.models.state import BanditState

logger = logging.getLogger(__name__)


def _load_state(engine: VolumeEngine, path: Path) -> BanditState:
    """Load the state file, starting fresh if it does not exist yet.

    Raw bytes go to the decoder so an undecodable file fails open there too.
    """
    if not path.exists():
        logger.info("No state at %s, starting fresh", path)
        return engine.initialize()
    return engine.deserialize(path.read_bytes())


def _save_state(engine: VolumeEngine, state: BanditState, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(engine.serialize(state), encoding="utf-8")
    logger.info("Saved state (%d updates) to %s", state.total_updates, path)


def _context_from_args(args: argparse.Namespace) -> BanditContext:
    return BanditContext(
        fatigue_level=args.fatigue,
        recovery_score=args.recovery,
        recent_performance_trend=args.trend,
    )


def cmd_init(engine: VolumeEngine, args: argparse.Namespace) -> int:
    _save_state(engine, engine.initialize(), args.state)
    return 0


def cmd_recommend(engine: VolumeEngine, args: argparse.Namespace) -> int:
    state = _load_state(engine, args.state)
    context = _context_from_args(args)

    if args.sets is None:
        rec = engine.recommend(context, state, args.group)
        change = None
    else:
        rec, change = engine.plan_volume(context, state, args.group, args.sets)

    print(f"{args.group}: {rec.action.label} (confidence {rec.confidence:.0%})")
    print(rec.reasoning)
    for line in rec.contextual_adjustments:
        print(f"  - {line}")
    for action in ACTIONS:
        estimate = get_action_success_rate(state, args.group, action, engine.config)
        print(
            f"  {action.label:<9} sampled={rec.sampled_values[action]:.3f} "
            f"estimate={estimate:.3f}"
        )
    if change is not None:
        print(f"{change.description}: {args.sets} -> {change.new_sets} sets")
    return 0


def cmd_feedback(engine: VolumeEngine, args: argparse.Namespace) -> int:
    state = _load_state(engine, args.state)
    feedback = WorkoutFeedback(
        performance_change=args.performance_change,
        perceived_difficulty=args.difficulty,
        soreness_24h=args.soreness,
        satisfaction=args.satisfaction,
    )
    new_state = engine.record_feedback(
        state,
        args.group,
        VolumeAction.from_label(args.action),
        _context_from_args(args),
        feedback,
    )
    _save_state(engine, new_state, args.state)
    return 0


def cmd_summary(engine: VolumeEngine, args: argparse.Namespace) -> int:
    state = _load_state(engine, args.state)
    summary = action_summary(state)
    print(f"{state.total_updates} updates, last at {state.last_update.isoformat()}")
    if summary.empty:
        print("No history yet.")
    else:
        print(summary.to_string(index=False))
    return 0


def _add_context_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--group", required=True, help="Muscle group, e.g. Chest")
    parser.add_argument("--fatigue", type=float, required=True, help="Fatigue level 0-1")
    parser.add_argument("--recovery", type=float, required=True, help="Recovery score 0-1")
    parser.add_argument("--trend", type=float, required=True, help="Performance trend -1..1")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="volume-engine",
        description="Adaptive per-muscle-group training volume recommendations.",
    )
    parser.add_argument(
        "--state", type=Path, default=STATE_PATH, help=f"State file (default {STATE_PATH})"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Write a fresh state file")
    init.set_defaults(func=cmd_init)

    rec = sub.add_parser("recommend", help="Recommend a volume action")
    _add_context_args(rec)
    rec.add_argument("--sets", type=int, default=None, help="Current weekly sets")
    rec.set_defaults(func=cmd_recommend)

    fb = sub.add_parser("feedback", help="Record workout feedback for an action")
    _add_context_args(fb)
    fb.add_argument("--action", required=True, choices=[a.label for a in ACTIONS])
    fb.add_argument("--performance-change", type=float, required=True)
    fb.add_argument("--difficulty", type=int, required=True, choices=range(1, 6))
    fb.add_argument("--soreness", type=int, default=None, choices=range(1, 6))
    fb.add_argument("--satisfaction", type=int, default=None, choices=range(1, 6))
    fb.set_defaults(func=cmd_feedback)

    summary = sub.add_parser("summary", help="Show learned history per group and action")
    summary.set_defaults(func=cmd_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = BanditConfig.from_env()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    rng = random.Random(args.seed) if args.seed is not None else None
    engine = VolumeEngine(config=config, rng=rng)
    return args.func(engine, args)


if __name__ == "__main__":
    sys.exit(main())
