"""Session log: records every completed round and summarises the session."""

import random
from dataclasses import dataclass, field
from typing import Iterator, Optional

from engine.config import GameConfig
from engine.match import MatchEngine
from engine.types import LEFT, RIGHT, RoundEndEvent


@dataclass
class RoundRecord:
    """One completed round."""
    round_number: int
    rallies: int
    left_score: int
    right_score: int
    elapsed_time: float
    scorer: str  # "left" or "right"
    scorer_label: str
    end_tick: int


class SessionRecorder:
    """Append-only log of round outcomes, fed by a MatchEngine.

    Only reads events; never touches engine state.
    """

    def __init__(self, engine: Optional[MatchEngine] = None):
        self._records: list[RoundRecord] = []
        self._labels = {LEFT: "Left", RIGHT: "Right"}
        if engine is not None:
            self.attach(engine)

    def attach(self, engine: MatchEngine) -> None:
        self._labels = {
            LEFT: engine.left_paddle.label,
            RIGHT: engine.right_paddle.label,
        }
        engine.on_round_end(self.record)

    def record(self, event: RoundEndEvent) -> RoundRecord:
        rec = RoundRecord(
            round_number=event.round_number or len(self._records) + 1,
            rallies=event.rally_count,
            left_score=event.left_score,
            right_score=event.right_score,
            elapsed_time=event.elapsed_time,
            scorer=event.scorer,
            scorer_label=self._labels.get(event.scorer, event.scorer),
            end_tick=event.tick,
        )
        self._records.append(rec)
        return rec

    @property
    def rounds(self) -> list[RoundRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RoundRecord]:
        return iter(list(self._records))


@dataclass
class SessionResult:
    """Outcome of a simulated session."""
    config: GameConfig
    records: list  # list[RoundRecord]
    left_score: int
    right_score: int
    ticks: int
    stats: dict = field(default_factory=dict)


def simulate_session(
    config: Optional[GameConfig] = None,
    rounds: int = 11,
    seed: Optional[int] = None,
    max_ticks: int = 200_000,
) -> SessionResult:
    """Play ``rounds`` points headlessly and collect the session log.

    Args:
        config: Engine configuration (defaults if omitted).
        rounds: Number of points to play.
        seed: Seed for the engine's random source.
        max_ticks: Safety cap in case neither paddle can score.
    """
    engine = MatchEngine(config, rng=random.Random(seed))
    recorder = SessionRecorder(engine)
    engine.run_rounds(rounds, max_ticks=max_ticks)

    records = recorder.rounds
    return SessionResult(
        config=engine.config,
        records=records,
        left_score=engine.left_score,
        right_score=engine.right_score,
        ticks=engine.state.tick,
        stats=compute_session_stats(records, tick_rate=engine.config.tick_rate),
    )


def compute_session_stats(records: list[RoundRecord], tick_rate: float = 60.0) -> dict:
    """Compute session statistics."""
    left_points = sum(1 for r in records if r.scorer == LEFT)
    right_points = sum(1 for r in records if r.scorer == RIGHT)

    rally_lengths = [r.rallies for r in records]
    avg_rally = sum(rally_lengths) / max(len(rally_lengths), 1)
    max_rally = max(rally_lengths) if rally_lengths else 0
    longest_rally_round = None
    if records:
        longest_rally_round = max(records, key=lambda r: r.rallies).round_number

    times = [r.elapsed_time for r in records]
    avg_time = sum(times) / max(len(times), 1)
    longest_time = max(times) if times else 0.0

    scoreless_rounds = sum(1 for r in records if r.rallies == 0)

    return {
        "total_rounds": len(records),
        "left_points": left_points,
        "right_points": right_points,
        "avg_rally_length": round(avg_rally, 1),
        "max_rally_length": max_rally,
        "longest_rally_round": longest_rally_round,
        "avg_round_time": round(avg_time, 2),
        "longest_round_time": round(longest_time, 2),
        "total_play_time": round(sum(times), 2),
        "unreturned_serves": scoreless_rounds,
        "session_duration": round(records[-1].end_tick / tick_rate, 2) if records else 0.0,
    }
