#!/usr/bin/env python3
"""
Headless session simulation.

Plays seeded auto-play sessions (launch a ball, then draw, every step) and
reports the ball economy and rush statistics as a CSV row.

Usage:
    python -m scripts.simulate --sessions 1000 --steps 500 --seed SIM_2025 --out out/sim.csv
"""
import argparse
import csv
import hashlib
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pachislo.config import default_game_config
from pachislo.config_hash import get_config_hash
from pachislo.logic.models import (
    Command,
    ControlFlow,
    GameConfig,
    GameState,
    Lose,
    NormalState,
    RushState,
    Transition,
    Win,
)
from pachislo.session import GameSession


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    sessions: int = 0
    steps: int = 0
    busted_sessions: int = 0
    total_final_balls: int = 0
    normal_draws: int = 0
    normal_wins: int = 0
    rush_entries: int = 0
    continuations: int = 0
    max_continuations: int = 0


class StatsOutput:
    """Output that feeds SimulationStats instead of a display."""

    def __init__(self, stats: SimulationStats):
        self.stats = stats

    def on_transition(self, transition: Transition) -> None:
        before, after = transition.before, transition.after
        if isinstance(before, NormalState) and isinstance(after, RushState):
            self.stats.rush_entries += 1
        if isinstance(after, RushState):
            self.stats.max_continuations = max(self.stats.max_continuations, after.n)
            if isinstance(before, RushState) and after.n > before.n:
                self.stats.continuations += 1

    def on_finish(self, state: GameState) -> None:
        pass

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        self.stats.normal_draws += 1
        if result.is_win():
            self.stats.normal_wins += 1

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        pass

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        pass


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def play_session(session: GameSession, max_steps: int) -> tuple[GameState, int, bool]:
    """
    Play one auto session.

    Returns (final state, steps played, whether balls ran out).
    """
    session.run_step_with_command(Command.START_GAME)
    for step in range(max_steps):
        if session.run_step_with_command(Command.LAUNCH_BALL) == ControlFlow.BREAK:
            return session.state, step, True
        session.run_step_with_command(Command.CAUSE_LOTTERY)
    session.run_step_with_command(Command.FINISH_GAME)
    return session.state, max_steps, False


def run_simulation(
    sessions: int,
    max_steps: int,
    seed_str: str,
    config: GameConfig | None = None,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        sessions: Number of sessions to play
        max_steps: Launch/draw steps per session before finishing
        seed_str: Seed string for reproducibility
        config: Game config (defaults from settings)
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results
    """
    config = config or default_game_config()
    base_seed = seed_to_int(seed_str)
    stats = SimulationStats()
    output = StatsOutput(stats)
    progress_interval = max(1, sessions // 100)

    for i in range(sessions):
        if verbose and i % progress_interval == 0:
            print(f"\rProgress: {i / sessions * 100:.1f}%", end="", flush=True)

        session = GameSession(config, output=output, seed=base_seed + i)
        state, steps, busted = play_session(session, max_steps)

        stats.sessions += 1
        stats.steps += steps
        stats.total_final_balls += state.balls + getattr(state, "rush_balls", 0)
        if busted:
            stats.busted_sessions += 1

    if verbose:
        print("\rProgress: 100.0%")
    return stats


def build_row(
    sessions: int,
    max_steps: int,
    seed_str: str,
    stats: SimulationStats,
    config_hash: str,
) -> dict[str, str | int]:
    """CSV row; timestamp and config_hash first."""
    n = stats.sessions or 1
    draws = stats.normal_draws or 1
    return {
        "timestamp": get_timestamp_iso(),
        "config_hash": config_hash,
        "sessions": sessions,
        "max_steps": max_steps,
        "seed": seed_str,
        "avg_final_balls": f"{stats.total_final_balls / n:.4f}",
        "avg_steps": f"{stats.steps / n:.4f}",
        "bust_rate": f"{stats.busted_sessions / n * 100:.4f}",
        "normal_hit_freq": f"{stats.normal_wins / draws * 100:.4f}",
        "rush_entries_per_session": f"{stats.rush_entries / n:.4f}",
        "avg_continuations_per_rush": (
            f"{stats.continuations / stats.rush_entries:.4f}" if stats.rush_entries else "0.0000"
        ),
        "max_continuations": stats.max_continuations,
    }


def write_csv(row: dict[str, str | int], output_path: str) -> None:
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)
    print(f"CSV written to: {output_path}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Pachislo session simulation")
    parser.add_argument("--sessions", type=int, default=1000, help="Number of sessions")
    parser.add_argument("--steps", type=int, default=500, help="Max launch/draw steps per session")
    parser.add_argument("--seed", type=str, default="SIM_2025", help="Seed string")
    parser.add_argument("--out", type=str, default="out/sim.csv", help="Output CSV path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print progress")
    args = parser.parse_args()

    if args.sessions <= 0 or args.steps <= 0:
        parser.error("--sessions and --steps must be positive")

    logging.basicConfig(level=logging.WARNING)
    config = default_game_config()
    stats = run_simulation(args.sessions, args.steps, args.seed, config, verbose=args.verbose)
    row = build_row(args.sessions, args.steps, args.seed, stats, get_config_hash(config))
    write_csv(row, args.out)

    print(f"Sessions: {stats.sessions}")
    print(f"Avg final balls: {row['avg_final_balls']}")
    print(f"Rush entries/session: {row['rush_entries_per_session']}")
    print(f"Max continuations: {stats.max_continuations}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
