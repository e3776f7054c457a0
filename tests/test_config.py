"""Tests for engine configuration and validation."""

import dataclasses
import math

import pytest

from engine.config import (
    PADDLE_PRESETS,
    BallConfig,
    ConfigError,
    GameConfig,
    PaddleConfig,
    paddle_from_preset,
)
from engine import court


def test_defaults_are_valid():
    """The stock configuration passes validation."""
    config = GameConfig()
    assert config.validate() is config
    assert config.left_paddle.strategy == "reactive"
    assert config.right_paddle.strategy == "predictive"
    assert config.left_paddle.success_rate == court.LEFT_SUCCESS_RATE
    assert config.right_paddle.success_rate == court.RIGHT_SUCCESS_RATE


@pytest.mark.parametrize("config, field", [
    (GameConfig(ball=BallConfig(radius=0)), "ball.radius"),
    (GameConfig(ball=BallConfig(mass=-0.1)), "ball.mass"),
    (GameConfig(ball=BallConfig(max_speed=0)), "ball.max_speed"),
    (GameConfig(ball=BallConfig(spin_factor=-1)), "ball.spin_factor"),
    (GameConfig(ball=BallConfig(max_bounce_angle=math.nan)), "ball.max_bounce_angle"),
    (GameConfig(field_width=0), "field_width"),
    (GameConfig(field_height=-10), "field_height"),
    (GameConfig(gravity=-0.5), "gravity"),
    (GameConfig(cooldown_ticks=-1), "cooldown_ticks"),
    (GameConfig(left_paddle=PaddleConfig(success_rate=1.5)), "left_paddle.success_rate"),
    (GameConfig(right_paddle=PaddleConfig(success_rate=-0.1)), "right_paddle.success_rate"),
    (GameConfig(right_paddle=PaddleConfig(strategy="psychic")), "right_paddle.strategy"),
])
def test_invalid_values_rejected(config, field):
    """Each invalid field is named in the error."""
    with pytest.raises(ConfigError) as excinfo:
        config.validate()
    assert any(p.startswith(field) for p in excinfo.value.problems), excinfo.value.problems


def test_all_problems_reported_together():
    """Validation collects every problem rather than stopping at the first."""
    config = GameConfig(gravity=-1, ball=BallConfig(radius=0, mass=0))
    with pytest.raises(ConfigError) as excinfo:
        config.validate()
    assert len(excinfo.value.problems) == 3
    assert isinstance(excinfo.value, ValueError)


def test_geometry_must_fit():
    """Paddles taller than the field or ball wider than it are rejected."""
    with pytest.raises(ConfigError):
        GameConfig(left_paddle=PaddleConfig(height=600)).validate()
    with pytest.raises(ConfigError):
        GameConfig(ball=BallConfig(radius=300)).validate()
    with pytest.raises(ConfigError):
        GameConfig(right_paddle=PaddleConfig(offset=445)).validate()


def test_zero_spin_and_gravity_allowed():
    """spin_factor and gravity may be zero."""
    GameConfig(gravity=0.0, ball=BallConfig(spin_factor=0.0)).validate()


def test_config_is_immutable():
    """Configs are replaced wholesale, never patched."""
    config = GameConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.gravity = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.ball.radius = 3


def test_from_dict_accepts_panel_shape():
    """The tuning panel's camelCase dict maps onto the config."""
    config = GameConfig.from_dict({
        "gravity": 0.3,
        "ballMass": 1.2,
        "ballRadius": 15,
        "ballMaxSpeed": 25,
        "ballMaxBounceAngle": math.pi / 3,
        "ballSpinFactor": 0.5,
        "leftPaddle": {"width": 12, "height": 100, "offset": 50, "successRate": 0.6},
        "rightPaddle": {"successRate": 0.9},
    })
    assert config.gravity == 0.3
    assert config.ball.mass == 1.2
    assert config.ball.radius == 15
    assert config.ball.max_speed == 25
    assert config.ball.max_bounce_angle == pytest.approx(math.pi / 3)
    assert config.ball.spin_factor == 0.5
    assert config.left_paddle.width == 12
    assert config.left_paddle.offset == 50
    assert config.left_paddle.success_rate == 0.6
    assert config.left_paddle.strategy == "reactive"
    assert config.right_paddle.success_rate == 0.9
    assert config.right_paddle.height == court.PADDLE_HEIGHT
    assert config.right_paddle.label == "Blue"
    config.validate()


def test_from_dict_reads_to_dict_output():
    """A config exported with to_dict comes back identical."""
    original = GameConfig(gravity=0.1, cooldown_ticks=30, ball=BallConfig(radius=8))
    assert GameConfig.from_dict(original.to_dict()) == original


def test_from_dict_ignores_unknown_keys():
    """Unrecognised keys are dropped."""
    config = GameConfig.from_dict({"theme": "dark", "leftPaddle": {"color": [255, 255, 0]}})
    assert config == GameConfig()


def test_presets_build_valid_paddles():
    """Every preset produces a paddle the engine accepts."""
    for key in PADDLE_PRESETS:
        paddle = paddle_from_preset(key, "left")
        GameConfig(left_paddle=paddle, right_paddle=paddle).validate()
        assert paddle.label.startswith(PADDLE_PRESETS[key]["label"])
