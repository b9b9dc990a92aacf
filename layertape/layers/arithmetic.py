"""
Differentiable arithmetic over floats and NumPy arrays.

Binary layers evaluate both operands against the same input, combine the
resulting tapes, and own them: the operand tapes are closed when the last
handle of the output is closed. On backward each operand receives its partial
delta, reduced back to the operand's shape when broadcasting was involved.
Deltas are passed as callables, so an untrainable operand never pays for its
partial.
"""

from abc import abstractmethod
from dataclasses import dataclass

from ..core import Layer, Tape, ValueTape
from ..utils.values import sum_to_shape


class BinaryTape(ValueTape):
    """Output of a binary layer; owns both upstream tapes."""

    def __init__(self, value, upstream1: Tape, upstream2: Tape):
        super().__init__(value, upstream1.is_trainable or upstream2.is_trainable)
        self.upstream1 = upstream1
        self.upstream2 = upstream2

    def _release(self) -> None:
        try:
            self.upstream1.close()
        finally:
            self.upstream2.close()


class PlusTape(BinaryTape):

    def __init__(self, upstream1: Tape, upstream2: Tape):
        super().__init__(upstream1.value + upstream2.value, upstream1, upstream2)

    def _force_backward(self, delta) -> None:
        self.upstream1.backward(lambda: sum_to_shape(delta, self.upstream1.value))
        self.upstream2.backward(lambda: sum_to_shape(delta, self.upstream2.value))


class TimesTape(BinaryTape):

    def __init__(self, upstream1: Tape, upstream2: Tape):
        super().__init__(upstream1.value * upstream2.value, upstream1, upstream2)

    def _force_backward(self, delta) -> None:
        a = self.upstream1.value
        b = self.upstream2.value
        self.upstream1.backward(lambda: sum_to_shape(delta * b, a))
        self.upstream2.backward(lambda: sum_to_shape(delta * a, b))


class NegativeTape(ValueTape):

    def __init__(self, upstream: Tape):
        super().__init__(-upstream.value, upstream.is_trainable)
        self.upstream = upstream

    def _force_backward(self, delta) -> None:
        self.upstream.backward(lambda: -delta)

    def _release(self) -> None:
        self.upstream.close()


class BinaryLayer(Layer):
    """Evaluates two operands and combines their tapes."""

    operand1: Layer
    operand2: Layer

    @abstractmethod
    def _combine(self, upstream1: Tape, upstream2: Tape) -> Tape:
        """Build the output tape from the two operand tapes."""

    def forward(self, input_tape: Tape) -> Tape:
        upstream1 = self.operand1.forward(input_tape)
        try:
            upstream2 = self.operand2.forward(input_tape)
        except Exception:
            upstream1.close()
            raise
        try:
            return self._combine(upstream1, upstream2)
        except Exception:
            try:
                upstream1.close()
            finally:
                upstream2.close()
            raise


@dataclass(frozen=True)
class Plus(BinaryLayer):
    operand1: Layer
    operand2: Layer

    def _combine(self, upstream1: Tape, upstream2: Tape) -> Tape:
        return PlusTape(upstream1, upstream2)


@dataclass(frozen=True)
class Times(BinaryLayer):
    operand1: Layer
    operand2: Layer

    def _combine(self, upstream1: Tape, upstream2: Tape) -> Tape:
        return TimesTape(upstream1, upstream2)


@dataclass(frozen=True)
class Negative(Layer):
    operand: Layer

    def forward(self, input_tape: Tape) -> Tape:
        upstream = self.operand.forward(input_tape)
        try:
            return NegativeTape(upstream)
        except Exception:
            upstream.close()
            raise
