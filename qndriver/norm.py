"""Squared L2 norm over a collection of parameter tensors."""

from __future__ import annotations

import math
from typing import Iterable, Union

import numpy as np
import torch

from .errors import NumericError

ParameterTensor = Union[torch.Tensor, np.ndarray]


def _squared_sum(tensor: ParameterTensor) -> float:
    if isinstance(tensor, torch.Tensor):
        if tensor.numel() == 0:
            raise NumericError("cannot reduce an empty tensor")
        try:
            return float(tensor.detach().to(torch.float64).pow(2).sum().item())
        except (RuntimeError, TypeError) as exc:
            raise NumericError(f"tensor reduction failed: {exc}") from exc
    if isinstance(tensor, np.ndarray):
        if tensor.size == 0:
            raise NumericError("cannot reduce an empty array")
        try:
            return float(np.sum(np.square(tensor.astype(np.float64))))
        except (TypeError, ValueError) as exc:
            raise NumericError(f"array reduction failed: {exc}") from exc
    raise NumericError(f"unsupported parameter type {type(tensor).__name__}")


def l2_norm(tensors: Iterable[ParameterTensor]) -> float:
    """
    Sum of squared elements over all tensors, in input order.

    No square root is taken: ``l2_norm([tensor([3., 4.])]) == 25.0``. The
    value is the squared Euclidean norm of the concatenated parameters, as
    used for weight-decay style regularization terms.

    Args:
        tensors: Torch tensors (``nn.Parameter`` included) or NumPy arrays.

    Returns:
        The accumulated float64 total; ``0.0`` for an empty collection.

    Raises:
        NumericError: If a tensor is empty or of an unsupported type, or
            if the total is not finite.
    """
    norm = 0.0
    for tensor in tensors:
        norm += _squared_sum(tensor)
        if not math.isfinite(norm):
            raise NumericError("squared norm is not finite")
    return norm


__all__ = ["ParameterTensor", "l2_norm"]
