"""Training loop for layer networks."""

from .trainer import Trainer, TrainingConfig

__all__ = [
    "Trainer",
    "TrainingConfig",
]
