"""L-BFGS step primitive built on ``torch.optim.LBFGS``."""

from __future__ import annotations

import math
from typing import List, Sequence

import torch

from ..errors import EvaluationError, NumericError, OptimizerError, OptimizerInitError, StepError
from ..logging import get_logger
from ..model import Model
from ..tensor import to_scalar
from .base import Converged, StepOutcome, Stepped
from .config import LbfgsConfig

logger = get_logger(__name__)


class Lbfgs:
    """
    Single-iteration L-BFGS stepper bound to one parameter set.

    Each :meth:`backward_step` runs exactly one quasi-Newton iteration of
    ``torch.optim.LBFGS`` (line search included), then re-evaluates the
    model at the new point to decide convergence. The curvature history
    lives inside the wrapped torch optimizer and persists across steps.

    Args:
        parameters: Leaf tensors with ``requires_grad=True`` sharing one
            floating dtype.
        config: Hyperparameters.
        model: Supplies ``loss()`` at the current parameter values.

    Raises:
        OptimizerInitError: If the config is invalid or the parameters are
            unsuitable.

    Attributes:
        n_steps: Steps taken so far.
        fn_evals: Model evaluations consumed by all steps so far.
    """

    def __init__(
        self,
        parameters: Sequence[torch.Tensor],
        config: LbfgsConfig,
        model: Model,
    ) -> None:
        if not isinstance(config, LbfgsConfig):
            raise OptimizerInitError(
                f"expected an LbfgsConfig, got {type(config).__name__}"
            )
        config.validate()
        params = list(parameters)
        _check_parameters(params)

        self.config = config
        self._model = model
        self._params: List[torch.Tensor] = params
        try:
            self._optimizer = torch.optim.LBFGS(
                params,
                lr=config.lr,
                max_iter=1,
                max_eval=1 + config.max_line_search_evals,
                tolerance_grad=config.grad_tol,
                tolerance_change=config.step_tol,
                history_size=config.history_size,
                line_search_fn=config.line_search,
            )
        except (ValueError, TypeError) as exc:
            raise OptimizerInitError(f"cannot build torch LBFGS: {exc}") from exc

        self.n_steps = 0
        self.fn_evals = 0
        self._step_evals = 0

    def backward_step(self, current_loss: torch.Tensor) -> StepOutcome:
        """
        Take one L-BFGS iteration starting from ``current_loss``.

        Returns:
            ``Converged`` if the gradient criterion holds at the new point,
            or the step criterion holds for a step that moved the
            parameters. ``Stepped`` otherwise, including when the line
            search left the parameters where they were. ``evals`` counts every model
            evaluation made during the step.

        Raises:
            StepError: On a non-finite loss or gradient, or a failure
                inside the torch optimizer.
            EvaluationError: If the model fails during the step.
        """
        if not math.isfinite(_loss_value(current_loss)):
            raise StepError(f"current loss is not finite: {current_loss}")

        previous = [p.detach().clone() for p in self._params]
        self._step_evals = 0

        try:
            self._optimizer.step(self._closure)
        except OptimizerError:
            raise
        except RuntimeError as exc:
            raise StepError(f"L-BFGS iteration failed: {exc}") from exc

        with torch.enable_grad():
            new_loss = self._closure()
        evals = self._step_evals

        loss_value = _loss_value(new_loss)
        grad = self._flat_grad()
        if not math.isfinite(loss_value):
            raise StepError(f"loss is not finite after step {self.n_steps}: {loss_value}")
        if not bool(torch.isfinite(grad).all()):
            raise StepError(f"gradient is not finite after step {self.n_steps}")

        delta = torch.cat(
            [(p.detach() - prev).reshape(-1) for p, prev in zip(self._params, previous)]
        )

        self.n_steps += 1
        self.fn_evals += evals

        grad_done = self._grad_converged(grad)
        # a line search that found no acceptable point leaves the parameters
        # untouched; only the gradient can end the run from there
        moved = bool(delta.abs().max() > 0)
        step_done = moved and self._step_converged(delta)
        logger.debug(
            "lbfgs step %d: %d evals, moved %s, grad criterion %s, step criterion %s",
            self.n_steps,
            evals,
            moved,
            grad_done,
            step_done,
        )
        if grad_done or step_done:
            return Converged(new_loss.detach(), evals)
        return Stepped(new_loss.detach(), evals)

    def _closure(self) -> torch.Tensor:
        self._optimizer.zero_grad()
        try:
            loss = self._model.loss()
        except OptimizerError:
            raise
        except Exception as exc:
            raise EvaluationError(f"model loss failed: {exc}") from exc
        self._step_evals += 1
        if not isinstance(loss, torch.Tensor) or loss.ndim != 0:
            raise EvaluationError("model loss must be a 0-dimensional tensor")
        loss.backward()

        decay = self.config.weight_decay
        if decay:
            with torch.no_grad():
                for p in self._params:
                    if p.grad is None:
                        p.grad = decay * p.detach().clone()
                    else:
                        p.grad.add_(p, alpha=decay)
        return loss

    def _flat_grad(self) -> torch.Tensor:
        return torch.cat(
            [
                (p.grad if p.grad is not None else torch.zeros_like(p)).reshape(-1)
                for p in self._params
            ]
        )

    def _grad_converged(self, grad: torch.Tensor) -> bool:
        if self.config.grad_conv == "rms_force":
            measure = grad.pow(2).mean().sqrt()
        else:
            measure = grad.abs().max()
        return float(measure) <= self.config.grad_tol

    def _step_converged(self, delta: torch.Tensor) -> bool:
        if self.config.step_conv == "rms_step":
            measure = delta.pow(2).mean().sqrt()
        else:
            measure = delta.abs().max()
        return float(measure) <= self.config.step_tol


def _check_parameters(params: List[torch.Tensor]) -> None:
    if not params:
        raise OptimizerInitError("parameter list is empty")
    for index, p in enumerate(params):
        if not isinstance(p, torch.Tensor):
            raise OptimizerInitError(
                f"parameter {index} is a {type(p).__name__}, not a tensor"
            )
        if not p.dtype.is_floating_point:
            raise OptimizerInitError(f"parameter {index} has non-floating dtype {p.dtype}")
        if not (p.is_leaf and p.requires_grad):
            raise OptimizerInitError(
                f"parameter {index} must be a leaf tensor with requires_grad=True"
            )
        if p.numel() == 0:
            raise OptimizerInitError(f"parameter {index} has no elements")
    dtypes = {p.dtype for p in params}
    if len(dtypes) > 1:
        raise OptimizerInitError(f"parameters mix dtypes: {sorted(str(d) for d in dtypes)}")


def _loss_value(loss: torch.Tensor) -> float:
    try:
        return to_scalar(loss)
    except NumericError as exc:
        raise StepError(f"loss is not a scalar: {exc}") from exc


__all__ = ["Lbfgs"]
