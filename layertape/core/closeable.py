"""
Close-exactly-once discipline for objects that may hold pooled resources.

Closing twice and never closing are both programming defects. They are
detected with ``assert`` statements, so the checks vanish under ``python -O``
and never change behavior in optimized runs. Reclaiming an unclosed object is
additionally reported by the finalizer when assertions are enabled and
``DebugConfig`` switches the diagnostic on.
"""

import warnings

from .debug_config import DebugConfig


class ClosingFlag:
    """Per-instance record of whether ``close()`` was called."""

    __slots__ = ("closed",)

    def __init__(self):
        self.closed = False

    def close(self) -> None:
        assert not self.closed, "close() called twice on the same resource"
        self.closed = True

    def assert_closed(self) -> None:
        assert self.closed, "resource was never closed"


class CloseableOnce:
    """
    Mixin for resources that must be closed exactly once.

    Supports ``with`` blocks, which close on every exit path. The finalizer is
    only a diagnostic; callers are expected to close explicitly.
    """

    def __init__(self):
        self._closing_flag = ClosingFlag()

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has been called on this instance."""
        return self._closing_flag.closed

    def close(self) -> None:
        self._closing_flag.close()

    def assert_closed(self) -> None:
        """Fail a debug assertion if this instance was never closed."""
        self._closing_flag.assert_closed()

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.close()

    def __del__(self):
        if not __debug__:
            return
        flag = getattr(self, "_closing_flag", None)
        if flag is None or flag.closed:
            return
        if not DebugConfig.finalizer_checks_enabled():
            return
        DebugConfig.record_leak()
        warnings.warn(
            f"{type(self).__name__} was reclaimed without being closed",
            ResourceWarning,
            stacklevel=2,
        )
