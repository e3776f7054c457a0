"""Matplotlib session charts: rally lengths, score progression, AI tuning sweeps."""

import logging
import os
from dataclasses import replace

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from engine.config import GameConfig, PADDLE_PRESETS, paddle_from_preset
from engine.types import LEFT, RIGHT
from sim.session import RoundRecord, simulate_session

logger = logging.getLogger(__name__)

SIDE_COLORS = {LEFT: "#ffd93d", RIGHT: "#4e7cff"}


def _style_chart(ax, title):
    """Apply dark theme styling to chart."""
    ax.set_facecolor("#0f0f1a")
    ax.set_title(title, color="#e0e0e0", fontsize=13, fontweight="bold", pad=12)
    ax.tick_params(colors="#888888", labelsize=9)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["bottom"].set_color("#333333")
    ax.spines["left"].set_color("#333333")
    ax.xaxis.label.set_color("#aaaaaa")
    ax.yaxis.label.set_color("#aaaaaa")


def _finish(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    return fig


def chart_rally_lengths(records: list[RoundRecord], save_path=None):
    """Chart 1: paddle hits per round, coloured by who won the point."""
    fig, ax = plt.subplots(figsize=(9, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Rally Length per Round")

    rounds = [r.round_number for r in records]
    rallies = [r.rallies for r in records]
    colors = [SIDE_COLORS[r.scorer] for r in records]
    ax.bar(rounds, rallies, color=colors, alpha=0.85)

    if rallies:
        mean = float(np.mean(rallies))
        ax.axhline(y=mean, color="#e94560", linestyle="--", linewidth=1.5, alpha=0.7)
        ax.text(rounds[-1], mean + 0.2, f"mean {mean:.1f}", color="#e94560", fontsize=9, ha="right")

    ax.set_xlabel("Round")
    ax.set_ylabel("Paddle hits")
    ax.grid(True, alpha=0.15, axis="y")
    return _finish(fig, save_path)


def chart_score_progression(records: list[RoundRecord], save_path=None):
    """Chart 2: running score of both sides."""
    fig, ax = plt.subplots(figsize=(9, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Score Progression")

    rounds = [0] + [r.round_number for r in records]
    left = [0] + [r.left_score for r in records]
    right = [0] + [r.right_score for r in records]
    ax.step(rounds, left, where="post", color=SIDE_COLORS[LEFT], linewidth=2, label="Left")
    ax.step(rounds, right, where="post", color=SIDE_COLORS[RIGHT], linewidth=2, label="Right")

    ax.set_xlabel("Round")
    ax.set_ylabel("Score")
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15)
    return _finish(fig, save_path)


def chart_rally_histogram(records: list[RoundRecord], save_path=None):
    """Chart 3: distribution of rally lengths."""
    fig, ax = plt.subplots(figsize=(8, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Rally Length Distribution")

    rallies = np.array([r.rallies for r in records], dtype=int)
    top = int(rallies.max()) if rallies.size else 1
    counts, edges = np.histogram(rallies, bins=np.arange(0, top + 2))
    ax.bar(edges[:-1], counts, width=0.9, color="#4ecdc4", alpha=0.85)

    ax.set_xlabel("Paddle hits in round")
    ax.set_ylabel("Rounds")
    ax.grid(True, alpha=0.15, axis="y")
    return _finish(fig, save_path)


def success_rate_sweep(
    rates=None,
    rounds: int = 11,
    seeds=(0, 1, 2),
    base: GameConfig = None,
    max_ticks: int = 50_000,
) -> dict:
    """Right points share and mean rally length as the right paddle improves.

    Runs once per (strategy, rate, seed) with the left paddle left at its
    configured defaults.

    Returns:
        {"rates": array, "reactive": {...}, "predictive": {...}} where each
        strategy maps to {"right_share": array, "avg_rally": array}.
    """
    base = base or GameConfig()
    rates = np.asarray(rates if rates is not None else np.linspace(0.0, 1.0, 6), dtype=float)
    out = {"rates": rates}

    for strategy in ("reactive", "predictive"):
        share = np.zeros(len(rates))
        rally = np.zeros(len(rates))
        for i, rate in enumerate(rates):
            right = replace(base.right_paddle, success_rate=float(rate), strategy=strategy)
            config = replace(base, right_paddle=right)
            right_points = total_points = 0
            rally_sum = 0.0
            for seed in seeds:
                result = simulate_session(config, rounds=rounds, seed=seed, max_ticks=max_ticks)
                right_points += result.stats["right_points"]
                total_points += result.stats["total_rounds"]
                rally_sum += result.stats["avg_rally_length"]
            share[i] = right_points / total_points * 100 if total_points else 0.0
            rally[i] = rally_sum / len(seeds)
        out[strategy] = {"right_share": share, "avg_rally": rally}
        logger.debug("sweep %s: %s", strategy, share)

    return out


def chart_success_rate_sweep(sweep: dict = None, save_path=None):
    """Chart 4: right paddle points share vs success rate, per strategy."""
    sweep = sweep or success_rate_sweep()

    fig, ax = plt.subplots(figsize=(8, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Right Paddle Success Rate vs Points Won")

    styles = {"reactive": ("#dc3545", "o"), "predictive": ("#28a745", "D")}
    for strategy, (color, marker) in styles.items():
        ax.plot(
            sweep["rates"], sweep[strategy]["right_share"],
            color=color, marker=marker, linewidth=2, markersize=8, label=strategy.title(),
        )

    ax.axhline(y=50, color="#888888", linestyle="--", linewidth=1, alpha=0.5)
    ax.set_xlabel("Success rate")
    ax.set_ylabel("Points won by right paddle (%)")
    ax.set_ylim(0, 105)
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15)
    return _finish(fig, save_path)


def chart_preset_matchups(rounds: int = 7, seed: int = 0, max_ticks: int = 50_000, save_path=None):
    """Chart 5: left points share for every pairing of paddle presets."""
    keys = list(PADDLE_PRESETS.keys())
    n = len(keys)
    matrix = np.zeros((n, n))

    for i, left_key in enumerate(keys):
        for j, right_key in enumerate(keys):
            config = GameConfig(
                left_paddle=paddle_from_preset(left_key, LEFT),
                right_paddle=paddle_from_preset(right_key, RIGHT),
            )
            result = simulate_session(config, rounds=rounds, seed=seed * 100 + i * 10 + j, max_ticks=max_ticks)
            total = result.stats["total_rounds"]
            matrix[i][j] = result.stats["left_points"] / total * 100 if total else 50.0

    fig, ax = plt.subplots(figsize=(8, 6))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Preset Matchups (left points %)")

    labels = [PADDLE_PRESETS[k]["label"] for k in keys]
    im = ax.imshow(matrix, cmap="RdYlGn", vmin=0, vmax=100, aspect="auto")
    ax.set_xticks(range(n))
    ax.set_yticks(range(n))
    ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=9)
    ax.set_yticklabels(labels, fontsize=9)
    ax.set_xlabel("Right paddle")
    ax.set_ylabel("Left paddle")

    for i in range(n):
        for j in range(n):
            val = matrix[i][j]
            color = "white" if val < 30 or val > 70 else "black"
            ax.text(j, i, f"{val:.0f}%", ha="center", va="center",
                    fontsize=10, fontweight="bold", color=color)

    cbar = fig.colorbar(im, ax=ax, shrink=0.8)
    cbar.set_label("Left points %", color="#aaa")
    cbar.ax.tick_params(colors="#888")
    return _finish(fig, save_path)


def generate_all_charts(output_dir=".", rounds: int = 21, seed: int = 42):
    """Generate all analysis charts and save to output directory."""
    os.makedirs(output_dir, exist_ok=True)
    session = simulate_session(rounds=rounds, seed=seed)

    charts = [
        ("chart_rally_lengths.png", lambda p: chart_rally_lengths(session.records, save_path=p)),
        ("chart_score_progression.png", lambda p: chart_score_progression(session.records, save_path=p)),
        ("chart_rally_histogram.png", lambda p: chart_rally_histogram(session.records, save_path=p)),
        ("chart_success_rate_sweep.png", lambda p: chart_success_rate_sweep(save_path=p)),
        ("chart_preset_matchups.png", lambda p: chart_preset_matchups(save_path=p)),
    ]

    paths = []
    for name, draw in charts:
        path = os.path.join(output_dir, name)
        draw(path)
        paths.append(path)
        print(f"  Saved: {path}")

    plt.close("all")
    return paths
