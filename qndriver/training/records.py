"""Result and per-step records produced by the optimization driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class StepRecord:
    """
    What happened on one step of a run.

    Args:
        step: Step index (0-based).
        loss: Loss after the step.
        evals: Evaluations reported by the optimizer for this step.
        fn_evals: Running evaluation total after this step, counting the
            initial evaluation.
        converged: Whether the optimizer reported convergence.
    """

    step: int
    loss: float
    evals: int
    fn_evals: int
    converged: bool


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of a completed run.

    A run that exhausts its budget without converging is still a
    successful run; ``converged`` is then False and ``loss`` is the loss
    after the last step.

    Args:
        loss: Final loss.
        converged: Whether the optimizer reported convergence.
        fn_evals: Total evaluations, including the initial one.
        n_steps: Number of step invocations.
        initial_loss: Loss before the first step.
        test_metric: Model test metric read at the end of the run.
        param_norm: Squared L2 norm of the parameters at the end, or None
            if it could not be computed.
        history: One record per step.
    """

    loss: float
    converged: bool
    fn_evals: int
    n_steps: int
    initial_loss: float
    test_metric: Optional[float] = None
    param_norm: Optional[float] = None
    history: List[StepRecord] = field(default_factory=list)

    def __float__(self) -> float:
        return self.loss

    def best_loss(self) -> float:
        """Lowest loss seen, the initial loss included."""
        return min([self.initial_loss] + [r.loss for r in self.history])


class StepCallback(Protocol):
    """
    Called with each :class:`StepRecord` once the running totals are updated.

    An exception raised by a callback aborts the run and propagates
    unchanged, which lets callers stop a run between steps.
    """

    def __call__(self, record: StepRecord) -> None:
        ...


__all__ = ["StepRecord", "RunResult", "StepCallback"]
