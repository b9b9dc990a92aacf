"""Unit tests for weight update rules."""

import numpy as np
import pytest

from layertape import L2Regularization, LearningRate, Optimizer


def test_learning_rate_step():
    opt = LearningRate(0.1)
    assert opt.update(1.0, 2.0) == pytest.approx(0.8)
    assert opt(1.0, 2.0) == pytest.approx(0.8)


def test_learning_rate_arrays():
    opt = LearningRate(0.5)
    new = opt.update(np.array([1.0, 2.0]), np.array([2.0, 2.0]))
    np.testing.assert_allclose(new, [0.0, 1.0])


@pytest.mark.parametrize("rate", [0.0, -0.1])
def test_learning_rate_must_be_positive(rate):
    with pytest.raises(ValueError):
        LearningRate(rate)


def test_l2_regularization_adds_decay():
    opt = L2Regularization(LearningRate(0.1), coefficient=0.5)
    # delta + 0.5 * value = 1.0 + 1.0
    assert opt.update(2.0, 1.0) == pytest.approx(2.0 - 0.1 * 2.0)
    assert "LearningRate(0.1)" in repr(opt)


def test_l2_regularization_rejects_negative():
    with pytest.raises(ValueError):
        L2Regularization(LearningRate(0.1), coefficient=-1.0)


def test_base_optimizer_is_abstract():
    with pytest.raises(TypeError):
        Optimizer()


def test_custom_optimizer_needs_only_update():
    class Halving(Optimizer):
        def update(self, value, delta):
            return value / 2.0

    assert Halving()(4.0, 1.0) == 2.0
