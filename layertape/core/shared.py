"""
Reference-counted aliasing for tapes.

A layer used twice in one network hands the same upstream computation to two
consumers. Each consumer gets its own handle via ``duplicate()`` and closes it
independently; the underlying resource is released only when the original and
every duplicate have been closed.

Two fan-in behaviors are provided:

- ``ReferenceCountedTape`` routes every ``backward`` call, from the original or
  any duplicate, straight to the shared backward routine.
- ``AccumulatingTape`` sums the contributions of all holders and sends the
  total upstream once, when the last holder closes.
"""

import threading
from abc import abstractmethod
from typing import Any, Optional

from .tape import Tape


class ReferenceCount:
    """Thread-safe shared ownership count, starting with one holder."""

    def __init__(self):
        self._count = 1
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def acquire(self) -> None:
        with self._lock:
            assert self._count > 0, "cannot share a resource that was already released"
            self._count += 1

    def release(self) -> bool:
        """Drop one holder. Returns True when that was the last one."""
        with self._lock:
            assert self._count > 0, "resource released more times than it was acquired"
            self._count -= 1
            return self._count == 0


class ReferenceCountedTape(Tape):
    """
    Base for concrete tapes whose duplicates share one computation.

    Subclasses implement ``value``, ``is_trainable`` and ``_force_backward``,
    and override ``_release`` to free what they own (usually by closing their
    upstream tapes). ``_release`` runs exactly once, after the last holder
    closes.
    """

    def __init__(self):
        super().__init__()
        self._references = ReferenceCount()

    @property
    def reference_count(self) -> int:
        """Number of open handles (this tape plus its duplicates)."""
        return self._references.count

    def duplicate(self) -> "DuplicateTape":
        self._references.acquire()
        return DuplicateTape(self)

    def close(self) -> None:
        super().close()
        self._drop_reference()

    def _drop_reference(self) -> None:
        if self._references.release():
            self._release()

    def _release(self) -> None:
        """Free the shared resource. Default: nothing to free."""


class DuplicateTape(Tape):
    """An independently closeable alias of a ``ReferenceCountedTape``."""

    def __init__(self, origin: ReferenceCountedTape):
        super().__init__()
        self._origin = origin

    @property
    def value(self):
        return self._origin.value

    @property
    def is_trainable(self) -> bool:
        return self._origin.is_trainable

    def _force_backward(self, delta) -> None:
        self._origin._force_backward(delta)

    def duplicate(self) -> "DuplicateTape":
        return self._origin.duplicate()

    def close(self) -> None:
        super().close()
        self._origin._drop_reference()


class AccumulatingTape(ReferenceCountedTape):
    """
    Fan-in point that sums gradient contributions.

    Deltas received through this tape or any of its duplicates are added
    together. When the last holder closes, the total is sent upstream with a
    single ``backward`` call and the upstream tape is closed. Nothing is sent
    if no contribution arrived.
    """

    def __init__(self, upstream: Tape):
        super().__init__()
        self._upstream = upstream
        self._delta_sum: Optional[Any] = None
        self._sum_lock = threading.Lock()

    @property
    def value(self):
        return self._upstream.value

    @property
    def is_trainable(self) -> bool:
        return self._upstream.is_trainable

    @property
    def pending_delta(self) -> Optional[Any]:
        """The sum accumulated so far, or None."""
        return self._delta_sum

    def _force_backward(self, delta) -> None:
        with self._sum_lock:
            if self._delta_sum is None:
                self._delta_sum = delta
            else:
                self._delta_sum = self._delta_sum + delta

    def _release(self) -> None:
        delta, self._delta_sum = self._delta_sum, None
        try:
            if delta is not None:
                self._upstream.backward(delta)
        finally:
            self._upstream.close()


class ValueTape(ReferenceCountedTape):
    """
    Convenience base for tapes whose value is computed once at construction.

    Subclasses pass the value and trainability to ``__init__`` and implement
    ``_force_backward``.
    """

    def __init__(self, value, is_trainable: bool):
        super().__init__()
        self._value = value
        self._is_trainable = bool(is_trainable)

    @property
    def value(self):
        return self._value

    @property
    def is_trainable(self) -> bool:
        return self._is_trainable

    @abstractmethod
    def _force_backward(self, delta) -> None:
        ...
