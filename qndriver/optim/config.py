"""Configuration for the L-BFGS step primitive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import OptimizerInitError

LINE_SEARCHES = ("strong_wolfe",)
GRAD_CONVERGENCE = ("min_force", "rms_force")
STEP_CONVERGENCE = ("min_step", "rms_step")


@dataclass(frozen=True)
class LbfgsConfig:
    """
    Hyperparameters for :class:`~qndriver.optim.Lbfgs`.

    Args:
        lr: Initial step size. Must be positive.
        history_size: Number of curvature pairs kept. Must be >= 1.
        max_line_search_evals: Bracketing and zoom iterations allowed in the
            line search, each costing one evaluation after the first trial
            point. Must be >= 1.
        line_search: "strong_wolfe", or None for a fixed step of ``lr``.
        grad_conv: "min_force" compares the largest absolute gradient entry
            with ``grad_tol``; "rms_force" compares the root-mean-square.
        grad_tol: Gradient tolerance. Must be >= 0.
        step_conv: "min_step" compares the largest absolute parameter change
            with ``step_tol``; "rms_step" compares the root-mean-square.
        step_tol: Step tolerance. Must be >= 0.
        weight_decay: If set, ``weight_decay * param`` is added to each
            gradient. Must be >= 0.
    """

    lr: float = 1.0
    history_size: int = 100
    max_line_search_evals: int = 25
    line_search: Optional[str] = "strong_wolfe"
    grad_conv: str = "min_force"
    grad_tol: float = 1e-7
    step_conv: str = "min_step"
    step_tol: float = 1e-9
    weight_decay: Optional[float] = None

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            OptimizerInitError: On the first invalid field.
        """
        if not self.lr > 0.0:
            raise OptimizerInitError(f"lr must be positive, got {self.lr}")
        if self.history_size < 1:
            raise OptimizerInitError(f"history_size must be >= 1, got {self.history_size}")
        if self.max_line_search_evals < 1:
            raise OptimizerInitError(
                f"max_line_search_evals must be >= 1, got {self.max_line_search_evals}"
            )
        if self.line_search is not None and self.line_search not in LINE_SEARCHES:
            raise OptimizerInitError(
                f"Unsupported line search '{self.line_search}'. "
                f"Supported: {list(LINE_SEARCHES)} or None"
            )
        if self.grad_conv not in GRAD_CONVERGENCE:
            raise OptimizerInitError(
                f"Unsupported gradient criterion '{self.grad_conv}'. "
                f"Supported: {list(GRAD_CONVERGENCE)}"
            )
        if self.step_conv not in STEP_CONVERGENCE:
            raise OptimizerInitError(
                f"Unsupported step criterion '{self.step_conv}'. "
                f"Supported: {list(STEP_CONVERGENCE)}"
            )
        if not self.grad_tol >= 0.0:
            raise OptimizerInitError(f"grad_tol must be >= 0, got {self.grad_tol}")
        if not self.step_tol >= 0.0:
            raise OptimizerInitError(f"step_tol must be >= 0, got {self.step_tol}")
        if self.weight_decay is not None and not self.weight_decay >= 0.0:
            raise OptimizerInitError(f"weight_decay must be >= 0, got {self.weight_decay}")


__all__ = ["LbfgsConfig", "LINE_SEARCHES", "GRAD_CONVERGENCE", "STEP_CONVERGENCE"]
