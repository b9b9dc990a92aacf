"""Coercion of Python and NumPy inputs into the values tapes carry."""

from typing import Any

import numpy as np


def to_value(x: Any) -> Any:
	"""Coerce a number or array-like into a tape value.

	- Python and NumPy scalars, and 0-d arrays, become ``float``
	- sequences and arrays become ``float64`` ndarrays
	- anything else raises TypeError
	"""
	if isinstance(x, bool):
		raise TypeError("Booleans are not differentiable values")
	if isinstance(x, (int, float)):
		return float(x)
	if np.isscalar(x):
		try:
			return float(x)
		except (TypeError, ValueError) as ex:
			raise TypeError(f"Unsupported scalar type for to_value: {type(x)}") from ex
	try:
		arr = np.asarray(x, dtype=np.float64)
	except (TypeError, ValueError) as ex:
		raise TypeError(f"Unsupported type for to_value: {type(x)}") from ex
	if arr.shape == ():
		return float(arr)
	return arr


def ones_like(value: Any) -> Any:
	"""Seed delta of ones shaped like ``value``."""
	if np.shape(value) == ():
		return 1.0
	return np.ones_like(value, dtype=np.float64)


def sum_to_shape(delta: Any, like: Any) -> Any:
	"""Reduce a broadcast delta back to the shape of ``like``.

	Leading axes added by broadcasting are summed away, as are axes where
	``like`` has size 1. A delta with fewer dimensions than ``like`` is
	broadcast up to it.
	"""
	shape = np.shape(like)
	if np.shape(delta) == shape:
		return delta
	arr = np.asarray(delta, dtype=np.float64)
	if arr.ndim < len(shape):
		return np.broadcast_to(arr, shape).copy()
	while arr.ndim > len(shape):
		arr = arr.sum(axis=0)
	for axis, size in enumerate(shape):
		if size == 1 and arr.shape[axis] != 1:
			arr = arr.sum(axis=axis, keepdims=True)
	if shape == ():
		return float(arr)
	if arr.shape != shape:
		arr = np.broadcast_to(arr, shape).copy()
	return arr
