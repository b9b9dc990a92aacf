"""
Leaf layers: constants, the network input, and trainable weights.

``Literal`` and ``Identity`` are placeholders: a network is mostly a tree of
layers waiting for data. ``Weight`` is the only layer that carries state across
evaluations, held in a ``Parameter`` cell that its tapes update on backward.
"""

import threading
from typing import Any, Optional

from ..core import Layer, Tape, ValueTape
from ..optimizers import LearningRate, Optimizer
from ..utils.values import to_value


class LiteralTape(ValueTape):
    """Untrainable tape holding a constant. Backward is always a no-op."""

    def __init__(self, value: Any):
        super().__init__(to_value(value), is_trainable=False)

    def _force_backward(self, delta) -> None:
        pass

    def __repr__(self) -> str:
        return f"LiteralTape({self.value!r})"


class Literal(Layer):
    """Constant layer; ignores its input."""

    def __init__(self, value: Any):
        self.value = to_value(value)

    def forward(self, input_tape: Tape) -> LiteralTape:
        return LiteralTape(self.value)

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class Identity(Layer):
    """Placeholder for the network input; returns a duplicate of it."""

    def forward(self, input_tape: Tape) -> Tape:
        return input_tape.duplicate()

    def __repr__(self) -> str:
        return "Identity()"


class Parameter:
    """
    Mutable value cell shared by a ``Weight`` and the tapes it produces.

    Updates are serialized with a lock so concurrent backward passes through
    the same weight do not lose updates.
    """

    def __init__(self, value: Any, optimizer: Optimizer, name: Optional[str] = None):
        self._value = to_value(value)
        self.optimizer = optimizer
        self.name = name
        self.update_count = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> Any:
        return self._value

    def apply_delta(self, delta: Any) -> None:
        with self._lock:
            self._value = self.optimizer.update(self._value, delta)
            self.update_count += 1


class WeightTape(ValueTape):
    """Trainable tape over a snapshot of a parameter's value."""

    def __init__(self, parameter: Parameter):
        super().__init__(parameter.value, is_trainable=True)
        self._parameter = parameter

    def _force_backward(self, delta) -> None:
        self._parameter.apply_delta(delta)


class Weight(Layer):
    """
    Trainable parameter layer.

    Each ``forward`` snapshots the current value; ``backward`` on the returned
    tape updates the value through the optimizer.

    Example:
        w = Weight(2.0, optimizer=LearningRate(0.1))
    """

    def __init__(self, value: Any, optimizer: Optional[Optimizer] = None, name: Optional[str] = None):
        self.parameter = Parameter(value, optimizer or LearningRate(), name=name)

    @property
    def value(self) -> Any:
        """Current parameter value."""
        return self.parameter.value

    @property
    def name(self) -> Optional[str]:
        return self.parameter.name

    def forward(self, input_tape: Tape) -> WeightTape:
        return WeightTape(self.parameter)

    def __repr__(self) -> str:
        if self.name:
            return f"Weight({self.value!r}, name={self.name!r})"
        return f"Weight({self.value!r})"
