"""Convenience coercion utilities for bridging Python/NumPy inputs to tapes and layers.

These helpers centralize the conversions used when feeding raw data into a
network, so callers do not have to wrap every number by hand.
"""

from typing import Any

from ..core import Layer, Tape
from ..layers.leaves import Literal, LiteralTape
from .values import to_value


def to_tape(x: Any) -> Tape:
	"""Coerce input into an untrainable tape.

	- If x is a Tape, return it as is (the caller keeps ownership)
	- Otherwise coerce via to_value and wrap in a LiteralTape
	"""
	if isinstance(x, Tape):
		return x
	return LiteralTape(to_value(x))


def to_layer(x: Any) -> Layer:
	"""Coerce input into a layer.

	- If x is a Layer, return it as is
	- If x is a Tape, raise TypeError: tapes belong to one evaluation
	- Otherwise coerce via to_value and wrap in a Literal
	"""
	if isinstance(x, Layer):
		return x
	if isinstance(x, Tape):
		raise TypeError("Cannot use a Tape as a layer; tapes belong to a single evaluation.")
	return Literal(to_value(x))
