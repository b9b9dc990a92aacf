"""Concrete layers built on the tape/layer contracts."""

from .arithmetic import (
    BinaryLayer,
    BinaryTape,
    Negative,
    NegativeTape,
    Plus,
    PlusTape,
    Times,
    TimesTape,
)
from .compose import Accumulate, Compose
from .leaves import Identity, Literal, LiteralTape, Parameter, Weight, WeightTape

__all__ = [
    # Leaves
    "Literal",
    "LiteralTape",
    "Identity",
    "Weight",
    "WeightTape",
    "Parameter",
    # Arithmetic
    "BinaryLayer",
    "BinaryTape",
    "Plus",
    "PlusTape",
    "Times",
    "TimesTape",
    "Negative",
    "NegativeTape",
    # Composition
    "Compose",
    "Accumulate",
]
