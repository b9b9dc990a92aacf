"""Core contracts: tapes, layers and the close-once resource discipline."""

from .closeable import CloseableOnce, ClosingFlag
from .debug_config import DebugConfig, debug_checks
from .layer import Layer
from .shared import (
    AccumulatingTape,
    DuplicateTape,
    ReferenceCount,
    ReferenceCountedTape,
    ValueTape,
)
from .tape import LazyDelta, Tape

__all__ = [
    # Resource discipline
    "CloseableOnce",
    "ClosingFlag",
    "DebugConfig",
    "debug_checks",
    # Contracts
    "Tape",
    "LazyDelta",
    "Layer",
    # Aliasing
    "ReferenceCount",
    "ReferenceCountedTape",
    "DuplicateTape",
    "AccumulatingTape",
    "ValueTape",
]
