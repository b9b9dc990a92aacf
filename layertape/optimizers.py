"""
Weight update rules.

A ``Weight`` layer hands every gradient it receives to its optimizer, which
returns the new parameter value. Optimizers are pure functions of
``(value, delta)``; they keep no per-weight state.
"""

from abc import ABC, abstractmethod
from typing import Any

from .utils.values import to_value


class Optimizer(ABC):
    """Base update rule: returns the parameter value after applying ``delta``."""

    @abstractmethod
    def update(self, value: Any, delta: Any) -> Any:
        """Return the new value."""

    def __call__(self, value: Any, delta: Any) -> Any:
        return self.update(value, delta)


class LearningRate(Optimizer):
    """Plain gradient descent: ``value - rate * delta``."""

    def __init__(self, rate: float = 0.001):
        """
        Args:
            rate: Step size (must be positive)
        """
        if rate <= 0:
            raise ValueError(f"Learning rate must be positive, got {rate}")
        self.rate = float(rate)

    def update(self, value: Any, delta: Any) -> Any:
        return to_value(value - self.rate * delta)

    def __repr__(self) -> str:
        return f"LearningRate({self.rate})"


class L2Regularization(Optimizer):
    """Adds weight decay ``coefficient * value`` to the delta before delegating."""

    def __init__(self, optimizer: Optimizer, coefficient: float):
        if coefficient < 0:
            raise ValueError(f"Regularization coefficient must be non-negative, got {coefficient}")
        self.optimizer = optimizer
        self.coefficient = float(coefficient)

    def update(self, value: Any, delta: Any) -> Any:
        return self.optimizer.update(value, delta + self.coefficient * value)

    def __repr__(self) -> str:
        return f"L2Regularization({self.optimizer!r}, {self.coefficient})"
