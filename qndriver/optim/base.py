"""Step outcomes and the interface of a single-step optimizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence, Union

import torch

from ..model import Model
from ..tensor import Scalar


def _check_evals(evals: int) -> None:
    if isinstance(evals, bool) or not isinstance(evals, int):
        raise TypeError(f"evals must be an int, got {type(evals).__name__}")
    if evals < 1:
        raise ValueError(f"a step consumes at least one evaluation, got evals={evals}")


@dataclass(frozen=True)
class Converged:
    """
    The optimizer met its convergence criterion on this step.

    Args:
        loss: Loss at the final point.
        evals: Function/gradient evaluations consumed by the step (>= 1).
    """

    loss: Scalar
    evals: int

    def __post_init__(self) -> None:
        _check_evals(self.evals)


@dataclass(frozen=True)
class Stepped:
    """
    One admissible step was taken and the optimizer can continue.

    Args:
        loss: Loss at the new point.
        evals: Function/gradient evaluations consumed by the step (>= 1).
    """

    loss: Scalar
    evals: int

    def __post_init__(self) -> None:
        _check_evals(self.evals)


StepOutcome = Union[Converged, Stepped]


class Optimizer(Protocol):
    """A stateful stepper bound to one parameter set for one run."""

    def backward_step(self, current_loss: torch.Tensor) -> StepOutcome:
        ...


OptimizerFactory = Callable[[Sequence[torch.Tensor], Any, Model], Optimizer]


__all__ = [
    "Converged",
    "Stepped",
    "StepOutcome",
    "Optimizer",
    "OptimizerFactory",
]
