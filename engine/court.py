"""Default playfield dimensions and physical constants.

Units are abstract: distances in field units (pixels on a 900x500 court),
velocities in units per tick, time in ticks at TICK_RATE Hz.
"""

import math

# Playfield
FIELD_WIDTH = 900
FIELD_HEIGHT = 500
BOUNDARY_OFFSET = 300  # distance past the edge before the ball counts as out

# Environment
GRAVITY = 0.0  # added to vertical velocity every tick

# Paddles
PADDLE_OFFSET = 75  # gap between the field edge and the paddle
PADDLE_WIDTH = 10
PADDLE_HEIGHT = 125
LEFT_SUCCESS_RATE = 0.8
RIGHT_SUCCESS_RATE = 0.25
TRACKING_GAIN = 0.1  # fraction of the remaining distance covered per tick

# Ball
BALL_MASS = 0.5
BALL_RADIUS = 10
BALL_MAX_SPEED = 20
BALL_MAX_BOUNCE_ANGLE = math.pi / 4
BALL_SPIN_FACTOR = 1.0
SERVE_SPEED = 5  # per-axis speed on serve

# Collision response
SPEED_GAIN = 1.05  # +5% on both axes per paddle hit
MASS_DECAY = 0.99  # -1% mass per paddle hit
UNSTICK_GAP = 1  # clearance left between ball and paddle after a hit

# Round loop
TICK_RATE = 60  # Hz
COOLDOWN_TICKS = 60  # ~1 second freeze after a point

# Below this horizontal speed the predictive paddle has no usable intercept
MIN_PREDICTABLE_VX = 1e-9
