"""Tests for the squared L2 norm."""

import math

import numpy as np
import pytest
import torch

from qndriver import NumericError, l2_norm


def test_l2_norm_is_squared_sum() -> None:
    assert l2_norm([torch.tensor([3.0, 4.0])]) == pytest.approx(25.0)


def test_l2_norm_empty_collection() -> None:
    assert l2_norm([]) == 0.0


def test_l2_norm_sums_across_tensors_and_dims() -> None:
    tensors = [
        torch.ones(2, 3),
        torch.tensor([[1.0, -2.0], [0.5, 0.0]], dtype=torch.float32),
        np.array([2.0, 2.0]),
    ]
    assert l2_norm(tensors) == pytest.approx(6.0 + 5.25 + 8.0)


def test_l2_norm_accepts_parameters() -> None:
    p = torch.nn.Parameter(torch.tensor([1.0, 2.0], dtype=torch.float64))
    assert l2_norm([p]) == pytest.approx(5.0)


def test_l2_norm_order_independent(torch_rng: torch.Generator) -> None:
    tensors = [
        torch.randn(5, generator=torch_rng, dtype=torch.float64) * scale
        for scale in (1e-3, 1.0, 1e3)
    ]
    forward = l2_norm(tensors)
    backward = l2_norm(list(reversed(tensors)))
    shuffled = l2_norm([tensors[1], tensors[2], tensors[0]])
    assert math.isclose(forward, backward, rel_tol=1e-9)
    assert math.isclose(forward, shuffled, rel_tol=1e-9)


def test_l2_norm_uses_double_precision() -> None:
    big = torch.full((4,), 1e20, dtype=torch.float32)
    assert l2_norm([big]) == pytest.approx(4e40, rel=1e-6)


def test_l2_norm_rejects_empty_tensor() -> None:
    with pytest.raises(NumericError):
        l2_norm([torch.tensor([1.0]), torch.empty(0)])


def test_l2_norm_rejects_non_finite_total() -> None:
    with pytest.raises(NumericError):
        l2_norm([torch.tensor([1e200, 1e200], dtype=torch.float64)])
    with pytest.raises(NumericError):
        l2_norm([torch.tensor([float("nan")])])


def test_l2_norm_rejects_unsupported_type() -> None:
    with pytest.raises(NumericError):
        l2_norm([[1.0, 2.0]])
