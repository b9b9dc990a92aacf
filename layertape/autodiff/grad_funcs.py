"""
Gradient helpers for layers.

These run one forward/backward pass with a recording input tape, so the
gradient with respect to the network input can be read back. Every tape opened
here is closed before returning.
"""

import threading
import warnings
from typing import Any, Callable, Optional, Tuple

import numpy as np

from ..core import Layer, ValueTape
from ..utils.values import ones_like, to_value


class GradientRecorder(ValueTape):
    """
    Trainable leaf tape that sums the deltas it receives.

    Used as the network input when the gradient with respect to the input is
    wanted. ``gradient`` is None until a delta arrives.
    """

    def __init__(self, value: Any):
        super().__init__(to_value(value), is_trainable=True)
        self._gradient: Optional[Any] = None
        self._gradient_lock = threading.Lock()

    @property
    def gradient(self) -> Optional[Any]:
        return self._gradient

    def _force_backward(self, delta) -> None:
        with self._gradient_lock:
            if self._gradient is None:
                self._gradient = delta
            else:
                self._gradient = self._gradient + delta


def value_and_grad(layer: Layer) -> Callable[[Any], Tuple[Any, Any]]:
    """
    Create a function returning the layer's value and its input gradient.

    The output is seeded with ones, so for a scalar output the result is the
    derivative of the output with respect to the input.

    Args:
        layer: Network to differentiate

    Returns:
        Function mapping an input value to ``(value, gradient)``
    """
    def value_and_grad_fn(x: Any) -> Tuple[Any, Any]:
        x = to_value(x)
        with GradientRecorder(x) as recorder:
            with layer.forward(recorder) as output:
                value = output.value
                output.backward(lambda: ones_like(value))
            # Deltas held by accumulating tapes are flushed on close
            gradient = recorder.gradient
        if gradient is None:
            gradient = np.zeros_like(x) if np.shape(x) else 0.0
        return value, gradient

    return value_and_grad_fn


def grad(layer: Layer) -> Callable[[Any], Any]:
    """Create a function computing the layer's gradient with respect to its input."""
    value_and_grad_fn = value_and_grad(layer)

    def grad_fn(x: Any) -> Any:
        return value_and_grad_fn(x)[1]

    return grad_fn


def check_gradient(
    layer: Layer, x: float, eps: float = 1e-6, tol: float = 1e-4
) -> Tuple[float, float, float]:
    """
    Compare the analytical input gradient against central finite differences.

    Only scalar inputs with scalar outputs are supported. The finite
    differences are taken first, so both estimates see the same weights. The
    analytical pass then runs a real backward: trainable weights in the layer
    are updated by their optimizers afterwards.

    Args:
        layer: Network to check
        x: Point at which to check
        eps: Finite-difference step
        tol: Relative error above which a ``RuntimeWarning`` is issued

    Returns:
        Tuple of (analytical, numerical, relative_error)
    """
    x = float(to_value(x))
    f_plus = _evaluate(layer, x + eps)
    f_minus = _evaluate(layer, x - eps)
    numerical = (f_plus - f_minus) / (2.0 * eps)

    _, analytical = value_and_grad(layer)(x)
    analytical = float(analytical)

    scale = max(abs(analytical), abs(numerical), 1.0)
    error = abs(analytical - numerical) / scale
    if error > tol:
        warnings.warn(
            f"Gradient check failed at x={x}: analytical {analytical}, "
            f"numerical {numerical}, relative error {error:.3g}",
            RuntimeWarning,
        )
    return analytical, numerical, error


def _evaluate(layer: Layer, x: float) -> float:
    """Forward-only evaluation of a scalar network."""
    with GradientRecorder(x) as recorder:
        with layer.forward(recorder) as output:
            return float(output.value)
