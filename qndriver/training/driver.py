"""Fixed-budget driver around a single-step quasi-Newton optimizer."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple, Union

import torch

from ..errors import EvaluationError, NumericError, OptimizerError, OptimizerInitError, StepError
from ..logging import get_logger
from ..model import Model
from ..norm import l2_norm
from ..optim import Converged, Lbfgs, LbfgsConfig, OptimizerFactory, Stepped
from ..params import ParameterStore
from ..tensor import to_f32, to_scalar
from .records import RunResult, StepCallback, StepRecord

logger = get_logger(__name__)

Parameters = Union[Sequence[torch.Tensor], ParameterStore]


def _resolve_parameters(parameters: Any) -> List[torch.Tensor]:
    if hasattr(parameters, "all_vars"):
        return list(parameters.all_vars())
    return list(parameters)


class OptimizationDriver:
    """
    Runs an optimizer against a model for at most ``max_steps`` steps.

    The driver evaluates the initial loss, builds the optimizer from the
    parameters, config and model, then calls ``backward_step`` until the
    optimizer reports convergence or the budget runs out. Running out of
    budget is not an error: the run still returns the last loss, with
    ``converged=False``.

    Args:
        model: Object with ``loss()`` and ``test_eval()``.
        parameters: Parameter tensors, or a container with ``all_vars()``.
        config: Forwarded verbatim to ``optimizer_factory``.
        optimizer_factory: Builds the optimizer as
            ``optimizer_factory(parameters, config, model)``. Defaults to
            :class:`~qndriver.optim.Lbfgs`.

    Example:
        >>> driver = OptimizationDriver(model, store, LbfgsConfig())
        >>> result = driver.run(max_steps=100)
        >>> result.converged, result.fn_evals
    """

    def __init__(
        self,
        model: Model,
        parameters: Parameters,
        config: Any = None,
        optimizer_factory: OptimizerFactory = Lbfgs,
    ) -> None:
        self.model = model
        self.parameters = _resolve_parameters(parameters)
        self.config = LbfgsConfig() if config is None else config
        self.optimizer_factory = optimizer_factory

    def run(
        self,
        max_steps: int,
        callbacks: Optional[List[StepCallback]] = None,
    ) -> RunResult:
        """
        Run the optimization loop.

        Args:
            max_steps: Upper bound on step invocations. 0 reports the
                initial loss only.
            callbacks: Invoked with each step's record.

        Returns:
            RunResult with the final loss, convergence flag and evaluation
            count.

        Raises:
            ValueError: If ``max_steps`` is negative.
            EvaluationError: If the model's loss or test metric fails.
            OptimizerInitError: If the optimizer cannot be built.
            StepError: If a step fails.
        """
        if max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")
        callbacks = callbacks or []

        loss, initial_loss = self._evaluate_loss()
        logger.info("initial loss: %s", initial_loss)

        optimizer = self._build_optimizer()
        fn_evals = 1
        converged = False
        test_metric: Optional[float] = None
        history: List[StepRecord] = []

        for step in range(max_steps):
            try:
                outcome = optimizer.backward_step(loss)
            except OptimizerError:
                raise
            except Exception as exc:
                raise StepError(f"step {step} failed: {exc}") from exc

            if isinstance(outcome, Converged):
                logger.info("step: %d", step)
                logger.info("loss: %s", to_scalar(outcome.loss))
                test_metric = self._test_metric()
                logger.info("test metric: %s", test_metric)
                fn_evals += outcome.evals
                loss = outcome.loss
                converged = True
                logger.info("converged after %d fn evals", fn_evals)
            elif isinstance(outcome, Stepped):
                logger.debug("step: %d", step)
                logger.debug("loss: %s", to_f32(outcome.loss))
                fn_evals += outcome.evals
                loss = outcome.loss
            else:
                raise StepError(
                    f"step {step} returned {type(outcome).__name__}, "
                    "expected Converged or Stepped"
                )

            record = StepRecord(
                step=step,
                loss=to_scalar(loss),
                evals=outcome.evals,
                fn_evals=fn_evals,
                converged=converged,
            )
            history.append(record)
            for cb in callbacks:
                cb(record)

            if converged:
                break

        if not converged:
            test_metric = self._test_metric()
            logger.info("test acc: %5.2f", test_metric)
            logger.warning("did not converge after %d fn evals", fn_evals)

        final_loss = to_scalar(loss)
        logger.info("loss: %s", final_loss)
        logger.info("%d fn evals", fn_evals)

        return RunResult(
            loss=final_loss,
            converged=converged,
            fn_evals=fn_evals,
            n_steps=len(history),
            initial_loss=initial_loss,
            test_metric=test_metric,
            param_norm=self._param_norm(),
            history=history,
        )

    def _evaluate_loss(self) -> Tuple[torch.Tensor, float]:
        try:
            loss = self.model.loss()
            return loss, to_scalar(loss)
        except EvaluationError:
            raise
        except Exception as exc:
            raise EvaluationError(f"model loss failed: {exc}") from exc

    def _test_metric(self) -> float:
        try:
            return to_scalar(self.model.test_eval())
        except EvaluationError:
            raise
        except Exception as exc:
            raise EvaluationError(f"model test metric failed: {exc}") from exc

    def _param_norm(self) -> Optional[float]:
        try:
            return l2_norm(self.parameters)
        except NumericError as exc:
            logger.warning("parameter norm unavailable: %s", exc)
            return None

    def _build_optimizer(self):
        try:
            return self.optimizer_factory(self.parameters, self.config, self.model)
        except OptimizerError:
            raise
        except Exception as exc:
            raise OptimizerInitError(f"cannot build optimizer: {exc}") from exc


def run_lbfgs_training(
    model: Model,
    parameters: Parameters,
    config: Optional[LbfgsConfig] = None,
    max_steps: int = 100,
) -> RunResult:
    """
    Minimize ``model.loss()`` over ``parameters`` with L-BFGS.

    One-call form of :class:`OptimizationDriver` with the default
    :class:`~qndriver.optim.Lbfgs` step primitive.
    """
    return OptimizationDriver(model, parameters, config).run(max_steps)


__all__ = ["OptimizationDriver", "Parameters", "run_lbfgs_training"]
