"""Tests for L-BFGS configuration validation."""

import pytest

from qndriver import OptimizerInitError
from qndriver.optim import LbfgsConfig


def test_default_config_is_valid() -> None:
    config = LbfgsConfig()
    config.validate()
    assert config.line_search == "strong_wolfe"
    assert config.history_size == 100
    assert config.max_line_search_evals == 25


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"lr": 0.0}, "lr"),
        ({"history_size": 0}, "history_size"),
        ({"max_line_search_evals": 0}, "max_line_search_evals"),
        ({"line_search": "backtracking"}, "line search"),
        ({"grad_conv": "max_force"}, "gradient criterion"),
        ({"step_conv": "tiny_step"}, "step criterion"),
        ({"grad_tol": -1.0}, "grad_tol"),
        ({"step_tol": float("nan")}, "step_tol"),
        ({"weight_decay": -0.1}, "weight_decay"),
    ],
)
def test_invalid_config_raises(overrides, message) -> None:
    config = LbfgsConfig(**overrides)
    with pytest.raises(OptimizerInitError, match=message):
        config.validate()


def test_no_line_search_is_valid() -> None:
    LbfgsConfig(line_search=None, grad_conv="rms_force", step_conv="rms_step").validate()
