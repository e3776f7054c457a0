"""Ball kinematics: gravity, spin drift, wall bounces, paddle collisions."""

import logging
import math
import random
from typing import Optional

from engine.config import GameConfig
from engine.types import LEFT, RIGHT, CollisionEvent, Vec2
from engine import court

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _toward_low_side(velocity: float, pos: float, centre: float) -> bool:
    """True if the ball should be placed on the low side of the paddle on this axis."""
    if velocity:
        return velocity < 0
    return pos < centre


class Ball:
    """The ball. Mutates itself once per tick; one instance lives for a whole match."""

    def __init__(
        self,
        radius: float,
        mass: float,
        gravity: float,
        max_speed: float,
        max_bounce_angle: float,
        spin_factor: float = 0.0,
        field_width: float = court.FIELD_WIDTH,
        field_height: float = court.FIELD_HEIGHT,
        boundary_offset: float = court.BOUNDARY_OFFSET,
        serve_speed: float = court.SERVE_SPEED,
        rng: Optional[random.Random] = None,
    ):
        """Create a ball at the centre of the field with a random diagonal velocity.

        Args:
            radius: Ball radius in field units.
            mass: Starting mass; restored on every reset.
            gravity: Added to vertical velocity every tick.
            max_speed: Per-axis speed cap applied after each paddle hit.
            max_bounce_angle: Steepest deflection (radians) from a paddle edge hit.
            spin_factor: Vertical drift per tick.
            field_width, field_height: Playfield size.
            boundary_offset: How far past the edge the ball must travel to be out.
            serve_speed: Per-axis speed on serve.
            rng: Random source for serve directions.
        """
        self.radius = radius
        self.initial_mass = mass
        self.mass = mass
        self.gravity = gravity
        self.max_speed = max_speed
        self.max_bounce_angle = max_bounce_angle
        self.spin = spin_factor
        self.field_width = field_width
        self.field_height = field_height
        self.boundary_offset = boundary_offset
        self.serve_speed = serve_speed
        self._rng = rng or random.Random()

        self.pos = Vec2(field_width / 2, field_height / 2)
        self.vel = Vec2(
            serve_speed * self._random_sign(),
            serve_speed * self._random_sign(),
        )

    @classmethod
    def from_config(cls, config: GameConfig, rng: Optional[random.Random] = None) -> "Ball":
        b = config.ball
        return cls(
            radius=b.radius,
            mass=b.mass,
            gravity=config.gravity,
            max_speed=b.max_speed,
            max_bounce_angle=b.max_bounce_angle,
            spin_factor=b.spin_factor,
            field_width=config.field_width,
            field_height=config.field_height,
            boundary_offset=config.boundary_offset,
            serve_speed=b.serve_speed,
            rng=rng,
        )

    @property
    def x(self) -> float:
        return self.pos.x

    @property
    def y(self) -> float:
        return self.pos.y

    def _random_sign(self) -> int:
        return 1 if self._rng.random() > 0.5 else -1

    def integrate(self) -> None:
        """Advance one tick: gravity, motion plus spin drift, then wall bounces.

        Walls reflect vertical velocity without losing energy.
        """
        self.vel.y += self.gravity
        self.pos.x += self.vel.x
        self.pos.y += self.vel.y + self.spin

        if self.pos.y - self.radius < 0:
            self.pos.y = self.radius
            self.vel.y = -self.vel.y
        elif self.pos.y + self.radius > self.field_height:
            self.pos.y = self.field_height - self.radius
            self.vel.y = -self.vel.y

    def overlaps(self, paddle) -> bool:
        """Axis-aligned box test, treating the ball as a square of side 2r."""
        return (
            self.pos.x - self.radius < paddle.x + paddle.width
            and self.pos.x + self.radius > paddle.x
            and self.pos.y + self.radius > paddle.y
            and self.pos.y - self.radius < paddle.y + paddle.height
        )

    def resolve_paddle_collision(self, paddle) -> Optional[CollisionEvent]:
        """Bounce off a paddle if touching it.

        The deflection depends on where the ball meets the paddle: the further
        from the paddle centre, the steeper the return, up to
        max_bounce_angle at either end. The new vertical speed is divided by the current
        mass, so lighter balls leave steeper. Every hit speeds the ball up 5%
        and sheds 1% of its mass before the speed cap is applied.

        Returns the CollisionEvent, or None if the ball is not touching.
        """
        if not self.overlaps(paddle):
            return None

        half_h = paddle.height / 2
        offset = _clamp(((paddle.y + half_h) - self.pos.y) / half_h, -1.0, 1.0)
        angle = offset * self.max_bounce_angle

        self.vel.x = -self.vel.x
        self.vel.y = self.vel.x * math.sin(angle) / self.mass
        self.spin = offset * self.spin

        self.vel.x *= court.SPEED_GAIN
        self.vel.y *= court.SPEED_GAIN
        self.mass *= court.MASS_DECAY

        # Cap applied last
        self.vel.x = _clamp(self.vel.x, -self.max_speed, self.max_speed)
        self.vel.y = _clamp(self.vel.y, -self.max_speed, self.max_speed)

        self._unstick(paddle)

        logger.debug(
            "paddle hit side=%s offset=%.3f vel=(%.2f, %.2f) mass=%.4f",
            paddle.side, offset, self.vel.x, self.vel.y, self.mass,
        )
        return CollisionEvent(
            side=paddle.side,
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            offset=offset,
            mass=self.mass,
        )

    def _unstick(self, paddle) -> None:
        """Push the ball out of the paddle along the axis of shallowest penetration.

        The ball goes out on the side it is now travelling toward, so a fast
        ball that has crossed the paddle centre line still leaves in front.
        """
        left_edge = self.pos.x - self.radius
        right_edge = self.pos.x + self.radius
        top_edge = self.pos.y - self.radius
        bottom_edge = self.pos.y + self.radius

        depth_x = min(right_edge - paddle.x, paddle.x + paddle.width - left_edge)
        depth_y = min(bottom_edge - paddle.y, paddle.y + paddle.height - top_edge)
        if depth_x <= 0 or depth_y <= 0:
            return

        if depth_x <= depth_y:
            if _toward_low_side(self.vel.x, self.pos.x, paddle.x + paddle.width / 2):
                self.pos.x = paddle.x - self.radius - court.UNSTICK_GAP
            else:
                self.pos.x = paddle.x + paddle.width + self.radius + court.UNSTICK_GAP
        else:
            if _toward_low_side(self.vel.y, self.pos.y, paddle.y + paddle.height / 2):
                self.pos.y = paddle.y - self.radius - court.UNSTICK_GAP
            else:
                self.pos.y = paddle.y + paddle.height + self.radius + court.UNSTICK_GAP

    def check_out_of_bounds(self) -> Optional[str]:
        """Return "left" or "right" once the ball is past the margin, else None."""
        if self.pos.x < -self.boundary_offset:
            return LEFT
        if self.pos.x > self.field_width + self.boundary_offset:
            return RIGHT
        return None

    def reset(self, direction: int = 1) -> None:
        """Serve again from the centre.

        Horizontal direction is given; vertical is random. Mass is restored.
        Spin and the speed/angle limits carry over from the previous round.
        """
        assert direction in (1, -1), f"serve direction must be +1 or -1, got {direction!r}"
        self.pos = Vec2(self.field_width / 2, self.field_height / 2)
        self.vel = Vec2(
            self.serve_speed * direction,
            self.serve_speed * self._random_sign(),
        )
        self.mass = self.initial_mass
