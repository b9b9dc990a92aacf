"""Utilities for layertape.

Only dependency-free helpers are imported here. ``layertape.utils.bridge``
depends on the layers package and must be imported explicitly.
"""

from .values import ones_like, sum_to_shape, to_value

__all__ = [
    "to_value",
    "ones_like",
    "sum_to_shape",
]
