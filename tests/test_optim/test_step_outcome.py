"""Tests for the Converged/Stepped step outcomes."""

import dataclasses

import pytest

from qndriver.optim import Converged, Stepped


@pytest.mark.parametrize("outcome_type", [Converged, Stepped])
def test_outcome_carries_loss_and_evals(outcome_type) -> None:
    outcome = outcome_type(0.25, 3)
    assert outcome.loss == 0.25
    assert outcome.evals == 3


@pytest.mark.parametrize("outcome_type", [Converged, Stepped])
def test_outcome_requires_positive_evals(outcome_type) -> None:
    with pytest.raises(ValueError, match="at least one evaluation"):
        outcome_type(1.0, 0)
    with pytest.raises(TypeError):
        outcome_type(1.0, 1.5)


def test_outcomes_are_frozen_and_distinct() -> None:
    outcome = Stepped(1.0, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        outcome.evals = 2
    assert Converged(1.0, 1) != Stepped(1.0, 1)
