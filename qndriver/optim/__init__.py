"""Step outcomes, the optimizer interface and the L-BFGS step primitive."""

from .base import Converged, Optimizer, OptimizerFactory, StepOutcome, Stepped
from .config import LbfgsConfig
from .lbfgs import Lbfgs

__all__ = [
    "Converged",
    "Lbfgs",
    "LbfgsConfig",
    "Optimizer",
    "OptimizerFactory",
    "StepOutcome",
    "Stepped",
]
