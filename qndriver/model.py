"""Capability expected from a model handed to the optimization driver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import torch

from .tensor import Scalar


@runtime_checkable
class Model(Protocol):
    """
    Anything that can report a training loss and a held-out metric.

    ``loss()`` must return a 0-dimensional tensor that is differentiable
    with respect to the parameters being optimized, recomputed from their
    current values. ``test_eval()`` returns a scalar diagnostic (for
    example held-out accuracy) that plays no part in the optimization.
    """

    def loss(self) -> torch.Tensor:
        ...

    def test_eval(self) -> Scalar:
        ...


__all__ = ["Model"]
