"""L-BFGS example: logistic regression on a synthetic two-class problem.

The model keeps its weights in a ParameterStore, reports the training
cross-entropy as its loss and held-out accuracy as its test metric, and
is handed to the optimization driver together with an L-BFGS config.
"""

from __future__ import annotations

import logging

import torch

import qndriver as qd


class LogisticRegression:
    """Binary logistic regression with a train/test split."""

    def __init__(self, store: qd.ParameterStore, x: torch.Tensor, y: torch.Tensor) -> None:
        n_train = int(0.8 * x.shape[0])
        self.x_train, self.y_train = x[:n_train], y[:n_train]
        self.x_test, self.y_test = x[n_train:], y[n_train:]
        self.weight = store.get("weight", (x.shape[1],))
        self.bias = store.get("bias", ())

    def logits(self, x: torch.Tensor) -> torch.Tensor:
        return x @ self.weight + self.bias

    def loss(self) -> torch.Tensor:
        return torch.nn.functional.binary_cross_entropy_with_logits(
            self.logits(self.x_train), self.y_train
        )

    def test_eval(self) -> float:
        with torch.no_grad():
            predictions = (self.logits(self.x_test) > 0).to(self.y_test.dtype)
        return 100.0 * (predictions == self.y_test).to(torch.float64).mean().item()


def main() -> None:
    """Fit the classifier and print the run summary."""
    torch.manual_seed(0)
    qd.configure_logging(level=logging.INFO)

    n_samples, n_features = 400, 5
    true_weight = torch.randn(n_features, dtype=torch.float64)
    x = torch.randn(n_samples, n_features, dtype=torch.float64)
    noise = 0.5 * torch.randn(n_samples, dtype=torch.float64)
    y = ((x @ true_weight + noise) > 0).to(torch.float64)

    store = qd.ParameterStore()
    model = LogisticRegression(store, x, y)
    config = qd.LbfgsConfig(history_size=10, grad_tol=1e-6)

    result = qd.run_lbfgs_training(model, store, config, max_steps=100)

    print(f"Initial loss: {result.initial_loss:.6f}")
    print(f"Converged: {result.converged} after {result.n_steps} steps")
    print(f"Function evaluations: {result.fn_evals}")
    print(f"Squared parameter norm: {result.param_norm:.4f}")
    print(f"Held-out accuracy: {result.test_metric:.2f}%")
    print(f"Final loss: {result.loss:.6f}")


if __name__ == "__main__":
    main()
