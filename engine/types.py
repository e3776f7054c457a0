"""Core data types for the pong simulation."""

from dataclasses import dataclass, field
from typing import Optional

LEFT = "left"
RIGHT = "right"
RALLYING = "rallying"
COOLDOWN = "cooldown"


def opponent(side: str) -> str:
    """The other side of the court."""
    return RIGHT if side == LEFT else LEFT


@dataclass
class Vec2:
    """2D vector for position and velocity. y grows downward."""
    x: float = 0.0
    y: float = 0.0

    def copy(self) -> "Vec2":
        return Vec2(self.x, self.y)


@dataclass
class CollisionEvent:
    """A resolved ball-paddle hit."""
    side: str  # paddle that was hit: "left" or "right"
    pos: Vec2  # ball position after unstick
    vel: Vec2  # ball velocity after the response
    offset: float  # normalized hit point, +1 top edge .. -1 bottom edge
    mass: float
    tick: int = 0


@dataclass
class RoundEndEvent:
    """Ball left the field and a point was scored."""
    rally_count: int
    left_score: int
    right_score: int
    elapsed_time: float  # seconds the ball was in play this round
    scorer: str  # "left" or "right"
    exit_side: str
    round_number: int = 0
    tick: int = 0


@dataclass
class MatchState:
    """Scores and round-loop counters."""
    left_score: int = 0
    right_score: int = 0
    cooldown_counter: int = 0
    rally_count: int = 0
    round_ticks: int = 0
    tick: int = 0
    round_number: int = 1

    @property
    def phase(self) -> str:
        return COOLDOWN if self.cooldown_counter > 0 else RALLYING


@dataclass
class TickResult:
    """Everything that happened during one tick."""
    tick: int
    phase: str  # phase the tick ran in
    collisions: list = field(default_factory=list)  # list[CollisionEvent]
    round_end: Optional[RoundEndEvent] = None

    @property
    def scored(self) -> bool:
        return self.round_end is not None


@dataclass(frozen=True)
class PaddleView:
    x: float
    y: float
    width: float
    height: float
    label: str


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of the engine state for polling consumers."""
    tick: int
    phase: str
    ball_x: float
    ball_y: float
    ball_radius: float
    left: PaddleView
    right: PaddleView
    left_score: int
    right_score: int
    rally_count: int
