"""Engine configuration: immutable parameter sets with validation.

A GameConfig is fixed for the lifetime of a MatchEngine. Changing any value
means building a new config (``dataclasses.replace``) and handing it to
``MatchEngine.reconfigure``, which rebuilds the whole simulation.
"""

import math
from dataclasses import asdict, dataclass, field

from engine import court


class ConfigError(ValueError):
    """Raised when a configuration would produce undefined motion."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("invalid configuration: " + "; ".join(problems))


# Paddle AI presets: success rate and movement strategy
PADDLE_PRESETS = {
    "rookie": {
        "label": "Rookie",
        "success_rate": 0.25,
        "strategy": "predictive",
    },
    "casual": {
        "label": "Casual",
        "success_rate": 0.5,
        "strategy": "reactive",
    },
    "steady": {
        "label": "Steady",
        "success_rate": 0.8,
        "strategy": "reactive",
    },
    "sharp": {
        "label": "Sharp",
        "success_rate": 0.9,
        "strategy": "predictive",
    },
    "wall": {
        "label": "Wall",
        "success_rate": 1.0,
        "strategy": "reactive",
    },
}


@dataclass(frozen=True)
class BallConfig:
    """Physical properties of the ball."""
    mass: float = court.BALL_MASS
    radius: float = court.BALL_RADIUS
    max_speed: float = court.BALL_MAX_SPEED
    max_bounce_angle: float = court.BALL_MAX_BOUNCE_ANGLE  # radians
    spin_factor: float = court.BALL_SPIN_FACTOR
    serve_speed: float = court.SERVE_SPEED


@dataclass(frozen=True)
class PaddleConfig:
    """Geometry and AI behaviour of one paddle."""
    width: float = court.PADDLE_WIDTH
    height: float = court.PADDLE_HEIGHT
    offset: float = court.PADDLE_OFFSET
    success_rate: float = court.LEFT_SUCCESS_RATE
    strategy: str = "reactive"
    label: str = ""


def _default_left() -> PaddleConfig:
    return PaddleConfig(success_rate=court.LEFT_SUCCESS_RATE, strategy="reactive", label="Yellow")


def _default_right() -> PaddleConfig:
    return PaddleConfig(success_rate=court.RIGHT_SUCCESS_RATE, strategy="predictive", label="Blue")


@dataclass(frozen=True)
class GameConfig:
    """Everything the engine needs to build a match."""
    field_width: float = court.FIELD_WIDTH
    field_height: float = court.FIELD_HEIGHT
    boundary_offset: float = court.BOUNDARY_OFFSET
    gravity: float = court.GRAVITY
    cooldown_ticks: int = court.COOLDOWN_TICKS
    tick_rate: float = court.TICK_RATE
    ball: BallConfig = field(default_factory=BallConfig)
    left_paddle: PaddleConfig = field(default_factory=_default_left)
    right_paddle: PaddleConfig = field(default_factory=_default_right)

    def validate(self) -> "GameConfig":
        """Check every field and raise ConfigError listing all problems.

        Returns self so construction and validation can be chained.
        """
        from engine.paddle import STRATEGIES  # paddle imports this module

        problems = []

        def positive(name, value):
            if not _finite(value) or value <= 0:
                problems.append(f"{name} must be > 0 (got {value!r})")

        def non_negative(name, value):
            if not _finite(value) or value < 0:
                problems.append(f"{name} must be >= 0 (got {value!r})")

        positive("field_width", self.field_width)
        positive("field_height", self.field_height)
        non_negative("boundary_offset", self.boundary_offset)
        non_negative("gravity", self.gravity)
        positive("tick_rate", self.tick_rate)
        if not isinstance(self.cooldown_ticks, int) or self.cooldown_ticks < 0:
            problems.append(f"cooldown_ticks must be a non-negative int (got {self.cooldown_ticks!r})")

        positive("ball.mass", self.ball.mass)
        positive("ball.radius", self.ball.radius)
        positive("ball.max_speed", self.ball.max_speed)
        positive("ball.max_bounce_angle", self.ball.max_bounce_angle)
        non_negative("ball.spin_factor", self.ball.spin_factor)
        positive("ball.serve_speed", self.ball.serve_speed)
        if _finite(self.ball.radius) and _finite(self.field_height):
            if self.ball.radius * 2 > self.field_height:
                problems.append("ball does not fit between the walls")

        for side, paddle in (("left_paddle", self.left_paddle), ("right_paddle", self.right_paddle)):
            positive(f"{side}.width", paddle.width)
            positive(f"{side}.height", paddle.height)
            non_negative(f"{side}.offset", paddle.offset)
            if not _finite(paddle.success_rate) or not 0.0 <= paddle.success_rate <= 1.0:
                problems.append(f"{side}.success_rate must be in [0, 1] (got {paddle.success_rate!r})")
            if paddle.strategy not in STRATEGIES:
                problems.append(f"{side}.strategy must be one of {sorted(STRATEGIES)} (got {paddle.strategy!r})")
            if _finite(paddle.height) and _finite(self.field_height) and paddle.height > self.field_height:
                problems.append(f"{side} is taller than the field")
            if _finite(paddle.offset) and _finite(paddle.width) and _finite(self.field_width):
                if paddle.offset + paddle.width > self.field_width / 2:
                    problems.append(f"{side} does not fit in its half of the field")

        if problems:
            raise ConfigError(problems)
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "GameConfig":
        """Build a config from a plain dict.

        Accepts snake_case keys (as produced by ``to_dict``) or the flat
        camelCase shape emitted by the tuning panel (``ballMass``,
        ``leftPaddle: {successRate, ...}``). Missing keys keep their defaults.
        Unknown keys are ignored. The result is not validated.
        """
        defaults = cls()
        ball_data = dict(data.get("ball", {}))
        for camel, snake in _BALL_KEYS.items():
            if camel in data:
                ball_data[snake] = data[camel]

        top = {}
        for key in ("field_width", "field_height", "boundary_offset", "gravity", "cooldown_ticks", "tick_rate"):
            camel = _to_camel(key)
            if key in data:
                top[key] = data[key]
            elif camel in data:
                top[key] = data[camel]

        return cls(
            ball=_build(BallConfig, ball_data, defaults.ball),
            left_paddle=_build(PaddleConfig, _paddle_dict(data, "left"), defaults.left_paddle),
            right_paddle=_build(PaddleConfig, _paddle_dict(data, "right"), defaults.right_paddle),
            **top,
        )


def paddle_from_preset(preset: str, side: str) -> PaddleConfig:
    """Return a default-geometry paddle using a PADDLE_PRESETS entry."""
    p = PADDLE_PRESETS[preset]
    return PaddleConfig(
        success_rate=p["success_rate"],
        strategy=p["strategy"],
        label=f"{p['label']} ({side})",
    )


_BALL_KEYS = {
    "ballMass": "mass",
    "ballRadius": "radius",
    "ballMaxSpeed": "max_speed",
    "ballMaxBounceAngle": "max_bounce_angle",
    "ballSpinFactor": "spin_factor",
    "ballServeSpeed": "serve_speed",
}


def _to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _paddle_dict(data: dict, side: str) -> dict:
    raw = data.get(f"{side}_paddle") or data.get(f"{side}Paddle") or {}
    out = {}
    for key, value in raw.items():
        out["success_rate" if key == "successRate" else key] = value
    return out


def _build(kind, values: dict, base):
    known = {k: v for k, v in values.items() if k in base.__dataclass_fields__}
    merged = {**asdict(base), **known}
    return kind(**merged)


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False
