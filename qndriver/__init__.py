"""qndriver - a fixed-budget driver for quasi-Newton optimization in PyTorch."""

__version__ = "0.1.0"

from .errors import (
    EvaluationError,
    NumericError,
    OptimizerError,
    OptimizerInitError,
    StepError,
)
from .logging import configure_logging, get_logger, set_log_level
from .model import Model
from .norm import l2_norm
from .optim import (
    Converged,
    Lbfgs,
    LbfgsConfig,
    Optimizer,
    OptimizerFactory,
    StepOutcome,
    Stepped,
)
from .params import ParameterStore
from .tensor import to_f32, to_scalar
from .training import (
    OptimizationDriver,
    RunResult,
    StepCallback,
    StepRecord,
    run_lbfgs_training,
)

__all__ = [
    "__version__",
    "Converged",
    "EvaluationError",
    "Lbfgs",
    "LbfgsConfig",
    "Model",
    "NumericError",
    "OptimizationDriver",
    "Optimizer",
    "OptimizerError",
    "OptimizerFactory",
    "OptimizerInitError",
    "ParameterStore",
    "RunResult",
    "StepCallback",
    "StepError",
    "StepOutcome",
    "StepRecord",
    "Stepped",
    "configure_logging",
    "get_logger",
    "l2_norm",
    "run_lbfgs_training",
    "set_log_level",
    "to_f32",
    "to_scalar",
]
