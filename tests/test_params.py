"""Tests for the parameter store."""

import pytest
import torch

from qndriver import ParameterStore


def test_get_creates_then_reuses() -> None:
    store = ParameterStore()
    w = store.get("w", (3,), init=0.5)
    assert isinstance(w, torch.nn.Parameter)
    assert w.dtype == torch.float64
    assert torch.equal(w.detach(), torch.full((3,), 0.5, dtype=torch.float64))
    assert store.get("w", (3,)) is w
    assert "w" in store
    assert len(store) == 1


def test_all_vars_keeps_insertion_order() -> None:
    store = ParameterStore()
    b = store.get("b", (1,))
    a = store.get("a", (2, 2))
    assert store.all_vars() == [b, a]
    assert store.names() == ["b", "a"]


def test_get_shape_mismatch_raises() -> None:
    store = ParameterStore()
    store.get("w", (2,))
    with pytest.raises(ValueError, match="shape"):
        store.get("w", (3,))


def test_callable_initializer(torch_rng: torch.Generator) -> None:
    store = ParameterStore()
    w = store.get("w", (2, 2), init=lambda shape: torch.randn(*shape, generator=torch_rng))
    assert w.shape == (2, 2)
    assert w.requires_grad

    with pytest.raises(ValueError, match="initializer"):
        store.get("v", (2,), init=lambda shape: torch.zeros(3))


def test_from_module() -> None:
    module = torch.nn.Linear(2, 1)
    store = ParameterStore.from_module(module)
    assert store.names() == ["weight", "bias"]
    assert store.all_vars()[0] is module.weight
