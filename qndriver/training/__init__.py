"""Optimization driver and its run records."""

from .driver import OptimizationDriver, Parameters, run_lbfgs_training
from .records import RunResult, StepCallback, StepRecord

__all__ = [
    "OptimizationDriver",
    "Parameters",
    "RunResult",
    "StepCallback",
    "StepRecord",
    "run_lbfgs_training",
]
