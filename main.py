#!/usr/bin/env python3
"""CLI entry point for the Pong AI simulation.

Usage:
    python main.py game [rounds] [left] [right]   Play a session (text mode) and print stats
    python main.py sweep                          Right paddle success-rate sweep
    python main.py analyze                        Generate session charts
    python main.py test                           Run all tests

Paddle presets: rookie, casual, steady, sharp, wall.
Set PONG_SIM_LOG_LEVEL=DEBUG (or INFO) to see engine logging.
"""

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def _parse_game_args(argv):
    from engine.config import PADDLE_PRESETS

    rounds = 11
    presets = []
    for arg in argv:
        if arg.isdigit():
            rounds = int(arg)
        elif arg in PADDLE_PRESETS:
            presets.append(arg)
        else:
            raise ValueError(f"unknown argument {arg!r}")
    left = presets[0] if len(presets) > 0 else None
    right = presets[1] if len(presets) > 1 else None
    return rounds, left, right


def cmd_game():
    """Play a session in text mode and print stats."""
    from dataclasses import replace

    from engine.config import GameConfig, PADDLE_PRESETS, paddle_from_preset
    from engine.types import LEFT, RIGHT
    from sim.session import simulate_session

    try:
        rounds, left, right = _parse_game_args(sys.argv[2:])
    except ValueError as exc:
        print(f"  {exc}")
        print("  Usage: python main.py game [rounds] [left_preset] [right_preset]")
        print("  Presets: " + ", ".join(PADDLE_PRESETS))
        sys.exit(1)

    config = GameConfig()
    if left:
        config = replace(config, left_paddle=paddle_from_preset(left, LEFT))
    if right:
        config = replace(config, right_paddle=paddle_from_preset(right, RIGHT))

    print("=" * 60)
    print("  AI PONG SESSION")
    print("=" * 60)
    lp, rp = config.left_paddle, config.right_paddle
    print(f"\n  Left:  {lp.label} ({lp.strategy}, success {lp.success_rate:.0%})")
    print(f"  Right: {rp.label} ({rp.strategy}, success {rp.success_rate:.0%})")
    print()

    result = simulate_session(config, rounds=rounds)
    s = result.stats

    for r in result.records:
        print(f"  Round {r.round_number:2d}: {r.rallies:2d} hits, {r.elapsed_time:5.2f}s, "
              f"{r.scorer_label} scores  [{r.left_score}-{r.right_score}]")

    if len(result.records) < rounds:
        print(f"\n  Stopped early: only {len(result.records)} of {rounds} rounds finished.")

    print()
    print(f"  FINAL SCORE: {result.left_score} - {result.right_score}")
    print()
    print(f"  Rounds played: {s['total_rounds']}")
    print(f"  Avg rally length: {s['avg_rally_length']} hits")
    print(f"  Max rally length: {s['max_rally_length']} hits (round {s['longest_rally_round']})")
    print(f"  Avg round time: {s['avg_round_time']}s  |  Longest: {s['longest_round_time']}s")
    print(f"  Unreturned serves: {s['unreturned_serves']}")
    print("=" * 60)


def cmd_sweep():
    """Sweep the right paddle's success rate for both strategies."""
    from sim.analysis import success_rate_sweep

    print("Sweeping right paddle success rate...")
    print("-" * 60)
    sweep = success_rate_sweep()
    print(f"  {'rate':>6s}  {'reactive %':>11s}  {'predictive %':>13s}")
    for i, rate in enumerate(sweep["rates"]):
        print(f"  {rate:6.2f}  {sweep['reactive']['right_share'][i]:11.1f}  "
              f"{sweep['predictive']['right_share'][i]:13.1f}")


def cmd_analyze():
    """Generate all analysis charts."""
    print("Generating analysis charts...")
    print("-" * 60)
    from sim.analysis import generate_all_charts
    output_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "output")
    paths = generate_all_charts(output_dir=output_dir)
    print(f"\nDone! {len(paths)} charts saved to {output_dir}/")


def cmd_test():
    """Run all tests."""
    import subprocess
    print("Running tests...")
    print("-" * 60)
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v"],
        cwd=os.path.dirname(os.path.abspath(__file__)),
    )
    sys.exit(result.returncode)


COMMANDS = {
    "game": cmd_game,
    "sweep": cmd_sweep,
    "analyze": cmd_analyze,
    "test": cmd_test,
}


def main():
    logging.basicConfig(
        level=os.environ.get("PONG_SIM_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(__doc__)
        print("Available commands:")
        for name, func in COMMANDS.items():
            print(f"  {name:12s} {func.__doc__}")
        sys.exit(1)

    COMMANDS[sys.argv[1]]()


if __name__ == "__main__":
    main()
