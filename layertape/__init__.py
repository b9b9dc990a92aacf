# MIT License
# See LICENSE file in the project root for full license text.
"""
layertape: composable networks with reverse-mode differentiation.

A network is a tree of ``Layer`` objects built once. Evaluating it against an
input ``Tape`` produces a tree of tapes holding the computed values; injecting
a delta into the root tape propagates gradients back to the trainable
``Weight`` layers. Tapes are close-once resources and are shared between
consumers through ``duplicate()``.
"""

__version__ = "0.1.0"
__author__ = "layertape Team"
__email__ = "layertape@example.com"

# Keep top-level import lightweight: expose the core contracts and the concrete
# layers. Subpackages (autodiff, training, utils) can be imported explicitly
# (e.g., `from layertape.training import Trainer`).

from .core import (
    AccumulatingTape,
    CloseableOnce,
    DebugConfig,
    DuplicateTape,
    Layer,
    ReferenceCountedTape,
    Tape,
    ValueTape,
    debug_checks,
)
from .layers import (
    Accumulate,
    Compose,
    Identity,
    Literal,
    LiteralTape,
    Negative,
    Plus,
    Times,
    Weight,
)
from .optimizers import L2Regularization, LearningRate, Optimizer

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__email__",
    # Contracts
    "Tape",
    "Layer",
    "CloseableOnce",
    "ReferenceCountedTape",
    "DuplicateTape",
    "AccumulatingTape",
    "ValueTape",
    # Debug checks
    "DebugConfig",
    "debug_checks",
    # Layers
    "Literal",
    "LiteralTape",
    "Identity",
    "Weight",
    "Plus",
    "Times",
    "Negative",
    "Compose",
    "Accumulate",
    # Optimizers
    "Optimizer",
    "LearningRate",
    "L2Regularization",
    # Submodules (exposed lazily via __getattr__)
    "autodiff",
    "training",
    "utils",
]


def __getattr__(name):  # Lazy import submodules on demand
    if name in {"autodiff", "training", "utils"}:
        import importlib

        return importlib.import_module(f"{__name__}.{name}")
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
