"""Match engine: the fixed-timestep round loop.

One tick, in order:
  1. Cooldown: count down and leave the ball frozen. Otherwise move the ball.
  2. Both paddles run their strategy against the current ball.
  3. Resolve collisions against the left paddle, then the right one.
  4. If the ball left the field: score for the opposite side, report the round,
     serve again from the centre and start the cooldown.

There is no score cap; a match runs for as long as it is ticked.
"""

import logging
import random
from typing import Callable, Optional

from engine.ball import Ball
from engine.config import GameConfig
from engine.paddle import Paddle
from engine.types import (
    COOLDOWN,
    LEFT,
    RIGHT,
    CollisionEvent,
    FrameSnapshot,
    MatchState,
    PaddleView,
    RoundEndEvent,
    TickResult,
    opponent,
)

logger = logging.getLogger(__name__)

CollisionListener = Callable[[CollisionEvent], None]
RoundEndListener = Callable[[RoundEndEvent], None]


class MatchEngine:
    """Owns the ball, both paddles and the score for one match."""

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        """Create a match.

        Args:
            config: Physical constants and paddle setup; validated here.
            rng: Random source shared by the serve and the reactive paddle.
                Pass a seeded ``random.Random`` for reproducible matches.
        """
        self.rng = rng or random.Random()
        self._collision_listeners: list[CollisionListener] = []
        self._round_end_listeners: list[RoundEndListener] = []
        self._build(config or GameConfig())

    def _build(self, config: GameConfig) -> None:
        self.config = config.validate()
        self.ball = Ball.from_config(config, self.rng)
        self.left_paddle = Paddle.from_config(config, LEFT, self.rng)
        self.right_paddle = Paddle.from_config(config, RIGHT, self.rng)
        self.state = MatchState()

    def reconfigure(self, config: GameConfig) -> None:
        """Replace the configuration and restart the match from scratch.

        Scores, ball and paddles are rebuilt; listeners stay subscribed.
        """
        self._build(config)
        logger.info("engine reconfigured, match state reset")

    # --- listeners ---

    def on_paddle_collision(self, listener: CollisionListener) -> CollisionListener:
        """Subscribe to paddle hits. Usable as a decorator."""
        self._collision_listeners.append(listener)
        return listener

    def on_round_end(self, listener: RoundEndListener) -> RoundEndListener:
        """Subscribe to scoring events. Usable as a decorator."""
        self._round_end_listeners.append(listener)
        return listener

    # --- queries ---

    @property
    def phase(self) -> str:
        return self.state.phase

    @property
    def left_score(self) -> int:
        return self.state.left_score

    @property
    def right_score(self) -> int:
        return self.state.right_score

    @property
    def elapsed_time(self) -> float:
        """Seconds the ball has been in play this round."""
        return self.state.round_ticks / self.config.tick_rate

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            tick=self.state.tick,
            phase=self.state.phase,
            ball_x=self.ball.x,
            ball_y=self.ball.y,
            ball_radius=self.ball.radius,
            left=_view(self.left_paddle),
            right=_view(self.right_paddle),
            left_score=self.state.left_score,
            right_score=self.state.right_score,
            rally_count=self.state.rally_count,
        )

    # --- simulation ---

    def tick(self) -> TickResult:
        """Advance the match by one fixed timestep."""
        state = self.state
        result = TickResult(tick=state.tick, phase=state.phase)

        if state.phase == COOLDOWN:
            state.cooldown_counter -= 1
        else:
            self.ball.integrate()
            state.round_ticks += 1

        self.left_paddle.move(self.ball)
        self.right_paddle.move(self.ball)

        for paddle in (self.left_paddle, self.right_paddle):
            event = self.ball.resolve_paddle_collision(paddle)
            if event is None:
                continue
            event.tick = state.tick
            state.rally_count += 1
            result.collisions.append(event)
            for listener in self._collision_listeners:
                listener(event)

        exit_side = self.ball.check_out_of_bounds()
        if exit_side is not None:
            result.round_end = self._score(exit_side)

        state.tick += 1
        assert state.cooldown_counter >= 0, "cooldown counter went negative"
        return result

    def _score(self, exit_side: str) -> RoundEndEvent:
        state = self.state
        scorer = opponent(exit_side)
        if scorer == LEFT:
            state.left_score += 1
        else:
            state.right_score += 1

        event = RoundEndEvent(
            rally_count=state.rally_count,
            left_score=state.left_score,
            right_score=state.right_score,
            elapsed_time=self.elapsed_time,
            scorer=scorer,
            exit_side=exit_side,
            round_number=state.round_number,
            tick=state.tick,
        )
        logger.info(
            "round %d to %s after %d hits (%.2fs), score %d-%d",
            state.round_number, scorer, state.rally_count, event.elapsed_time,
            state.left_score, state.right_score,
        )

        # Serve away from the side the ball went out on
        self.ball.reset(1 if exit_side == LEFT else -1)
        state.rally_count = 0
        state.round_ticks = 0
        state.round_number += 1
        state.cooldown_counter = self.config.cooldown_ticks

        for listener in self._round_end_listeners:
            listener(event)
        return event

    def run(self, ticks: int) -> list[TickResult]:
        """Tick a fixed number of times and return every result."""
        return [self.tick() for _ in range(ticks)]

    def run_rounds(self, rounds: int, max_ticks: int = 100_000) -> list[RoundEndEvent]:
        """Tick until ``rounds`` points have been scored or ``max_ticks`` elapse."""
        ended: list[RoundEndEvent] = []
        if rounds <= 0:
            return ended
        for _ in range(max_ticks):
            result = self.tick()
            if result.round_end is not None:
                ended.append(result.round_end)
                if len(ended) >= rounds:
                    break
        if len(ended) < rounds:
            logger.warning("stopped after %d ticks with %d/%d rounds played", max_ticks, len(ended), rounds)
        return ended


def _view(paddle: Paddle) -> PaddleView:
    return PaddleView(
        x=paddle.x,
        y=paddle.y,
        width=paddle.width,
        height=paddle.height,
        label=paddle.label,
    )
