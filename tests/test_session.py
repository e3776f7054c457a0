"""Tests for the session recorder and statistics."""

import random

from engine.match import MatchEngine
from engine.types import RoundEndEvent, Vec2
from engine import court
from sim.session import (
    RoundRecord,
    SessionRecorder,
    compute_session_stats,
    simulate_session,
)


def _force_exit(engine, side):
    if side == "left":
        engine.ball.pos = Vec2(-court.BOUNDARY_OFFSET - 1, 250)
        engine.ball.vel = Vec2(-5, 0)
    else:
        engine.ball.pos = Vec2(court.FIELD_WIDTH + court.BOUNDARY_OFFSET + 1, 250)
        engine.ball.vel = Vec2(5, 0)
    return engine.tick()


def test_recorder_appends_one_record_per_round():
    """Each scoring event becomes one record with the scorer's label."""
    engine = MatchEngine(rng=random.Random(1))
    recorder = SessionRecorder(engine)

    _force_exit(engine, "left")
    _force_exit(engine, "right")
    _force_exit(engine, "left")

    assert len(recorder) == 3
    scorers = [r.scorer for r in recorder]
    assert scorers == ["right", "left", "right"]
    assert [r.scorer_label for r in recorder] == ["Blue", "Yellow", "Blue"]
    last = recorder.rounds[-1]
    assert (last.left_score, last.right_score) == (1, 2)
    assert [r.round_number for r in recorder] == [1, 2, 3]


def test_recorder_returns_copies():
    """Callers can't mutate the log through the rounds list."""
    recorder = SessionRecorder()
    recorder.record(RoundEndEvent(
        rally_count=3, left_score=1, right_score=0,
        elapsed_time=2.5, scorer="left", exit_side="right",
    ))
    recorder.rounds.clear()
    assert len(recorder) == 1

    recorder.clear()
    assert len(recorder) == 0


def test_recorder_without_engine_uses_side_names():
    """Detached recorder labels scorers by side."""
    recorder = SessionRecorder()
    rec = recorder.record(RoundEndEvent(
        rally_count=0, left_score=0, right_score=1,
        elapsed_time=1.0, scorer="right", exit_side="left",
    ))
    assert rec.scorer_label == "Right"
    assert rec.round_number == 1


def test_simulate_session_plays_requested_rounds():
    """A seeded session plays the requested number of points."""
    result = simulate_session(rounds=3, seed=4)
    assert len(result.records) == 3
    assert result.left_score + result.right_score == 3
    assert result.stats["total_rounds"] == 3
    assert result.ticks > 0


def test_simulate_session_is_reproducible():
    """Same seed, same session."""
    a = simulate_session(rounds=3, seed=21)
    b = simulate_session(rounds=3, seed=21)
    assert a.records == b.records


def _record(n, rallies, left, right, t, scorer):
    return RoundRecord(
        round_number=n, rallies=rallies, left_score=left, right_score=right,
        elapsed_time=t, scorer=scorer, scorer_label=scorer.title(), end_tick=n * 100,
    )


def test_session_stats():
    """Stats summarise points, rally lengths and times."""
    records = [
        _record(1, 4, 1, 0, 3.0, "left"),
        _record(2, 0, 1, 1, 1.0, "right"),
        _record(3, 9, 2, 1, 6.0, "left"),
    ]
    stats = compute_session_stats(records, tick_rate=60)
    assert stats["total_rounds"] == 3
    assert stats["left_points"] == 2
    assert stats["right_points"] == 1
    assert stats["avg_rally_length"] == 4.3
    assert stats["max_rally_length"] == 9
    assert stats["longest_rally_round"] == 3
    assert stats["avg_round_time"] == 3.33
    assert stats["longest_round_time"] == 6.0
    assert stats["total_play_time"] == 10.0
    assert stats["unreturned_serves"] == 1
    assert stats["session_duration"] == 5.0


def test_session_stats_empty():
    """An empty log gives zeroed stats."""
    stats = compute_session_stats([])
    assert stats["total_rounds"] == 0
    assert stats["avg_rally_length"] == 0
    assert stats["max_rally_length"] == 0
    assert stats["longest_rally_round"] is None
    assert stats["session_duration"] == 0.0
