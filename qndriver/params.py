"""Ordered container of trainable parameters."""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Sequence, Union

import torch
from torch import nn

Initializer = Union[float, Callable[[Sequence[int]], torch.Tensor]]


class ParameterStore:
    """
    Named, insertion-ordered store of ``torch.nn.Parameter`` objects.

    Models fetch their parameters by name with :meth:`get`; the optimizer
    receives them all, in creation order, through :meth:`all_vars`.

    Example:
        >>> store = ParameterStore()
        >>> w = store.get("w", (2,), init=1.0)
        >>> store.get("w", (2,)) is w
        True
        >>> len(store.all_vars())
        1
    """

    def __init__(self) -> None:
        self._params: Dict[str, nn.Parameter] = {}

    @classmethod
    def from_module(cls, module: nn.Module) -> "ParameterStore":
        """Build a store holding the named parameters of ``module``."""
        store = cls()
        for name, param in module.named_parameters():
            store._params[name] = param
        return store

    def get(
        self,
        name: str,
        shape: Sequence[int],
        init: Initializer = 0.0,
        dtype: torch.dtype = torch.float64,
    ) -> nn.Parameter:
        """
        Return the parameter called ``name``, creating it on first use.

        Args:
            name: Parameter name.
            shape: Expected shape.
            init: Constant fill value or a callable ``shape -> Tensor``.
            dtype: Dtype of a newly created parameter.

        Raises:
            ValueError: If an existing parameter has a different shape, or
                an initializer returns the wrong shape.
        """
        shape = tuple(int(s) for s in shape)
        if name in self._params:
            existing = self._params[name]
            if tuple(existing.shape) != shape:
                raise ValueError(
                    f"parameter {name!r} has shape {tuple(existing.shape)}, requested {shape}"
                )
            return existing

        if callable(init):
            data = torch.as_tensor(init(shape), dtype=dtype)
            if tuple(data.shape) != shape:
                raise ValueError(
                    f"initializer for {name!r} returned shape {tuple(data.shape)}, expected {shape}"
                )
        else:
            data = torch.full(shape, float(init), dtype=dtype)

        param = nn.Parameter(data.clone())
        self._params[name] = param
        return param

    def all_vars(self) -> List[nn.Parameter]:
        """Return every parameter in insertion order."""
        return list(self._params.values())

    def names(self) -> List[str]:
        return list(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[nn.Parameter]:
        return iter(self._params.values())


__all__ = ["Initializer", "ParameterStore"]
