"""Error types raised by qndriver.

Every error derives from :class:`OptimizerError`. Non-convergence within
the step budget is not an error and has no exception type.
"""

from __future__ import annotations


class OptimizerError(RuntimeError):
    """Base class for all qndriver errors."""


class EvaluationError(OptimizerError):
    """The model's loss or test metric could not be computed."""


class OptimizerInitError(OptimizerError, ValueError):
    """The optimizer could not be built from the given parameters and config."""


class StepError(OptimizerError):
    """A single optimizer step failed, e.g. on a non-finite loss or gradient."""


class NumericError(OptimizerError):
    """A tensor reduction or scalar conversion failed."""


__all__ = [
    "OptimizerError",
    "EvaluationError",
    "OptimizerInitError",
    "StepError",
    "NumericError",
]
