"""Gradient helpers for differentiating layers with respect to their input."""

from .grad_funcs import GradientRecorder, check_gradient, grad, value_and_grad

__all__ = [
    "GradientRecorder",
    "grad",
    "value_and_grad",
    "check_gradient",
]
