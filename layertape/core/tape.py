"""
Tape: the runtime record of one evaluation.

A tape carries the value computed by a layer for one input, knows whether it
lies on a path that needs gradients, and routes gradient contributions back to
the tapes it was built from. Tapes own a close-once resource lifecycle because
the numeric buffers behind ``value`` may be pooled or native.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar, Union, final

from .closeable import CloseableOnce

Data = TypeVar("Data")
Delta = TypeVar("Delta")

# A delta, or a zero-argument callable producing it on demand.
LazyDelta = Union[Delta, Callable[[], Delta]]


class Tape(CloseableOnce, ABC, Generic[Data, Delta]):
    """
    Abstract evaluation handle carrying ``Data`` and accepting ``Delta``.

    Variants implement ``value``, ``is_trainable``, ``_force_backward`` and
    ``duplicate``. The public ``backward`` entry point is provided here and
    must not be overridden: it owns the untrainable short-circuit.

    Lifecycle: constructed, then ``backward`` at most once per logical
    consumer, then ``close()`` exactly once. A closed tape must not be used.
    """

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "backward" in cls.__dict__:
            raise TypeError(f"{cls.__name__} must implement _force_backward, not override backward")

    @property
    @abstractmethod
    def value(self) -> Data:
        """The computed result, fixed at construction."""

    @property
    @abstractmethod
    def is_trainable(self) -> bool:
        """Whether gradient injection has any effect."""

    @abstractmethod
    def _force_backward(self, delta: Delta) -> None:
        """Route ``delta`` to upstream tapes. Only called when trainable."""

    @abstractmethod
    def duplicate(self) -> "Tape[Data, Delta]":
        """
        Return a tape sharing this tape's value and backward behavior.

        The duplicate and this tape must be closed independently.
        """

    @final
    def backward(self, delta: LazyDelta) -> None:
        """
        Inject a gradient contribution.

        Args:
            delta: The delta, or a zero-argument callable computing it. On an
                untrainable tape this is a no-op and the callable is never
                invoked.
        """
        if not self.is_trainable:
            return
        if callable(delta):
            delta = delta()
        self._force_backward(delta)
