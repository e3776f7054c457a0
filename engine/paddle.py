"""Paddles and their AI movement strategies.

Two strategies model different opponents:
  - reactive: chases the ball's current height, but only reacts on a
    fraction of ticks (success_rate is a probability)
  - predictive: extrapolates where the ball will cross the paddle and moves
    there every tick (success_rate scales how far it moves)
"""

import logging
import random
from typing import Optional

from engine.config import ConfigError, GameConfig, PaddleConfig
from engine.types import LEFT
from engine import court

logger = logging.getLogger(__name__)


class Paddle:
    """A vertical paddle that can only move up and down."""

    def __init__(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        success_rate: float = court.LEFT_SUCCESS_RATE,
        field_height: float = court.FIELD_HEIGHT,
        side: str = LEFT,
        label: str = "",
        strategy: Optional["MovementStrategy"] = None,
    ):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.success_rate = success_rate
        self.field_height = field_height
        self.side = side
        self.label = label or side.title()
        self.strategy = strategy or ReactiveStrategy()
        self.clamp()

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        side: str,
        rng: Optional[random.Random] = None,
    ) -> "Paddle":
        """Build the left or right paddle, vertically centred."""
        pc: PaddleConfig = config.left_paddle if side == LEFT else config.right_paddle
        if side == LEFT:
            x = pc.offset
        else:
            x = config.field_width - pc.offset - pc.width
        return cls(
            x=x,
            y=config.field_height / 2 - pc.height / 2,
            width=pc.width,
            height=pc.height,
            success_rate=pc.success_rate,
            field_height=config.field_height,
            side=side,
            label=pc.label,
            strategy=make_strategy(pc.strategy, rng),
        )

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def clamp(self) -> None:
        """Keep the paddle fully inside the field."""
        if self.y < 0:
            self.y = 0
        if self.y + self.height > self.field_height:
            self.y = self.field_height - self.height

    def move(self, ball) -> None:
        """Run this paddle's strategy for one tick."""
        self.strategy.move(self, ball)

    def follow(self, ball, rng) -> bool:
        """Reactive tracking: one trial per tick against success_rate.

        On success close 10% of the gap to the ball's height. Returns whether
        the paddle reacted this tick.
        """
        reacted = rng.random() < self.success_rate
        if reacted:
            self.y += (ball.y - self.center_y) * court.TRACKING_GAIN
        self.clamp()
        return reacted

    def anticipate(self, ball) -> bool:
        """Predictive tracking: aim at the height where the ball will cross this paddle.

        Moves 10% x success_rate of the gap every tick. With no horizontal
        ball speed there is no crossing point, so the paddle holds still.
        Returns whether a prediction was made.
        """
        if abs(ball.vel.x) < court.MIN_PREDICTABLE_VX:
            logger.debug("%s paddle: no horizontal ball speed, holding", self.side)
            self.clamp()
            return False
        predicted_y = ball.y + ball.vel.y * (self.x - ball.x) / ball.vel.x
        self.y += (predicted_y - self.center_y) * court.TRACKING_GAIN * self.success_rate
        self.clamp()
        return True


class MovementStrategy:
    """How a paddle decides to move each tick."""

    name = ""
    randomized = False

    def move(self, paddle: Paddle, ball) -> None:
        raise NotImplementedError


class ReactiveStrategy(MovementStrategy):
    """Follow the ball with probability success_rate per tick."""

    name = "reactive"
    randomized = True

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def move(self, paddle: Paddle, ball) -> None:
        paddle.follow(ball, self.rng)


class PredictiveStrategy(MovementStrategy):
    """Move toward the extrapolated intercept every tick."""

    name = "predictive"

    def move(self, paddle: Paddle, ball) -> None:
        paddle.anticipate(ball)


STRATEGIES = {
    ReactiveStrategy.name: ReactiveStrategy,
    PredictiveStrategy.name: PredictiveStrategy,
}


def make_strategy(name: str, rng: Optional[random.Random] = None) -> MovementStrategy:
    """Instantiate a strategy by name. Only randomized strategies take the rng."""
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ConfigError([f"unknown paddle strategy {name!r}"]) from None
    if cls.randomized:
        return cls(rng)
    return cls()
