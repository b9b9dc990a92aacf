"""
Global development-time checks for layertape.

Disposal mistakes (closing a tape twice, or never closing it) are programming
defects. The primary checks are ``assert`` statements, which disappear under
``python -O``. The finalizer diagnostic configured here is an extra, optional
safety net: when enabled, tapes reclaimed without being closed are counted and
reported as a ``ResourceWarning``.
"""

import threading


class DebugConfig:
    """
    Global debug configuration.

    Finalizer checks are off by default. They never affect results; they only
    record leaks so tests and development runs can surface them.
    """

    _finalizer_checks: bool = False
    _leak_count: int = 0
    _lock = threading.Lock()

    @classmethod
    def set_finalizer_checks(cls, enabled: bool) -> None:
        """
        Enable or disable the finalizer leak diagnostic.

        Args:
            enabled: Whether reclaimed, unclosed objects are reported
        """
        cls._finalizer_checks = bool(enabled)

    @classmethod
    def finalizer_checks_enabled(cls) -> bool:
        """Check if the finalizer leak diagnostic is enabled."""
        return cls._finalizer_checks

    @classmethod
    def record_leak(cls) -> None:
        """Count one object reclaimed without being closed."""
        with cls._lock:
            cls._leak_count += 1

    @classmethod
    def get_leak_count(cls) -> int:
        """Number of leaks recorded since the last reset."""
        return cls._leak_count

    @classmethod
    def reset_leak_count(cls) -> None:
        """Forget previously recorded leaks."""
        with cls._lock:
            cls._leak_count = 0

    @classmethod
    def reset(cls) -> None:
        """Restore defaults: finalizer checks off, no recorded leaks."""
        cls._finalizer_checks = False
        cls.reset_leak_count()


class debug_checks:
    """
    Context manager for temporarily switching the finalizer diagnostic.

    Example:
        with debug_checks(False):
            # leaked tapes are not reported here
            ...
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.old_enabled = None

    def __enter__(self):
        self.old_enabled = DebugConfig.finalizer_checks_enabled()
        DebugConfig.set_finalizer_checks(self.enabled)
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        DebugConfig.set_finalizer_checks(self.old_enabled)
