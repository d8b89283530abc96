"""Scalar extraction from tensors, arrays and plain numbers."""

from __future__ import annotations

from numbers import Real
from typing import Union

import numpy as np
import torch

from .errors import NumericError

Scalar = Union[float, int, torch.Tensor, np.ndarray, np.generic]

_NUMPY_DTYPES = {
    torch.float64: np.float64,
    torch.float32: np.float32,
}


def to_scalar(value: Scalar, dtype: torch.dtype = torch.float64) -> float:
    """
    Convert a scalar-valued tensor or number to a Python float.

    The value is cast to ``dtype`` before it is read, so a float32 request
    yields the single-precision value widened back to a Python float.

    Args:
        value: A Python number, a 0-dimensional torch tensor, or a
            0-dimensional NumPy array / NumPy scalar.
        dtype: Either ``torch.float64`` or ``torch.float32``.

    Returns:
        The scalar as a Python float.

    Raises:
        NumericError: If ``value`` is not a true scalar or cannot be cast.
        ValueError: If ``dtype`` is not a supported floating dtype.
    """
    if dtype not in _NUMPY_DTYPES:
        raise ValueError(f"dtype must be torch.float64 or torch.float32, got {dtype}")

    if isinstance(value, torch.Tensor):
        if value.ndim != 0:
            raise NumericError(
                f"expected a scalar tensor, got shape {tuple(value.shape)}"
            )
        try:
            return float(value.detach().to(dtype).item())
        except (RuntimeError, TypeError) as exc:
            raise NumericError(f"cannot convert tensor to {dtype}: {exc}") from exc

    if isinstance(value, (np.ndarray, np.generic)):
        arr = np.asarray(value)
        if arr.ndim != 0:
            raise NumericError(f"expected a scalar array, got shape {arr.shape}")
        try:
            return float(arr.astype(_NUMPY_DTYPES[dtype]))
        except (TypeError, ValueError) as exc:
            raise NumericError(f"cannot convert array to {dtype}: {exc}") from exc

    if isinstance(value, Real) and not isinstance(value, bool):
        return float(_NUMPY_DTYPES[dtype](value))

    raise NumericError(f"cannot convert {type(value).__name__} to a scalar")


def to_f32(value: Scalar) -> float:
    """Shorthand for ``to_scalar(value, torch.float32)``."""
    return to_scalar(value, torch.float32)


__all__ = ["Scalar", "to_scalar", "to_f32"]
