"""
Training loop for layer networks.

A network is expected to end in its own loss: the value of its output tape is
the quantity to minimize. Each step evaluates the network on one input, seeds
the output with ones, and lets the ``Weight`` layers update themselves as the
gradient reaches them. Every tape is closed on every exit path.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
import time

import numpy as np

from ..core import Layer
from ..layers.leaves import LiteralTape
from ..utils.values import ones_like


@dataclass
class TrainingConfig:
    """Configuration for the training loop."""
    max_epochs: int = 100

    # Logging
    log_interval: int = 10
    verbose: bool = True

    # Early stopping
    early_stopping: bool = False
    patience: int = 10
    min_delta: float = 1e-4

    def __post_init__(self):
        if self.max_epochs < 1:
            raise ValueError("max_epochs must be at least 1")
        if self.log_interval < 1:
            raise ValueError("log_interval must be at least 1")
        if self.patience < 1:
            raise ValueError("patience must be at least 1")


class Trainer:
    """
    Trainer for layer networks whose output is a loss.

    Example:
        network = Times(Plus(Literal(1.0), Identity()), Weight(2.0))
        trainer = Trainer(network, TrainingConfig(max_epochs=5, verbose=False))
        history = trainer.train([0.5, 1.5])
    """

    def __init__(self, network: Layer, config: Optional[TrainingConfig] = None):
        """
        Initialize trainer.

        Args:
            network: Network to train; its output value is the loss
            config: Training configuration
        """
        if not isinstance(network, Layer):
            raise TypeError(f"Trainer expects a Layer, got {type(network).__name__}")
        self.network = network
        self.config = config or TrainingConfig()

        # Training state
        self.epoch = 0
        self.global_step = 0
        self.training_history: Dict[str, List[float]] = {"loss": []}

        # Early stopping state
        self.best_loss = float('inf')
        self.patience_counter = 0

    def predict(self, input_value: Any) -> Any:
        """Evaluate the network without injecting a gradient."""
        with LiteralTape(input_value) as input_tape:
            with self.network.forward(input_tape) as output:
                return output.value

    def train_step(self, input_value: Any) -> Dict[str, float]:
        """
        Perform a single training step.

        Args:
            input_value: Network input

        Returns:
            Dictionary of metrics from this step
        """
        with LiteralTape(input_value) as input_tape:
            with self.network.forward(input_tape) as output:
                loss = output.value
                output.backward(lambda: ones_like(loss))

        return {"loss": float(np.sum(loss))}

    def train_epoch(self, inputs: Iterable[Any]) -> Dict[str, float]:
        """
        Train for one epoch.

        Args:
            inputs: Input values, one step each

        Returns:
            Average metrics for the epoch
        """
        inputs = list(inputs)
        losses = []

        for step_idx, input_value in enumerate(inputs):
            metrics = self.train_step(input_value)
            losses.append(metrics["loss"])

            if self.config.verbose and step_idx % self.config.log_interval == 0:
                self._log_step(step_idx, len(inputs), metrics)

            self.global_step += 1

        avg_metrics = {}
        if losses:
            avg_metrics["loss"] = sum(losses) / len(losses)
        return avg_metrics

    def train(self, inputs: Iterable[Any]) -> Dict[str, List[float]]:
        """
        Full training loop.

        Args:
            inputs: Input values, reused every epoch

        Returns:
            Training history
        """
        inputs = list(inputs)
        if not inputs:
            raise ValueError("Training requires at least one input")

        if self.config.verbose:
            print(f"Starting training for {self.config.max_epochs} epochs")

        start_time = time.time()

        for epoch in range(self.config.max_epochs):
            self.epoch = epoch + 1

            train_metrics = self.train_epoch(inputs)
            epoch_loss = train_metrics["loss"]
            self.training_history["loss"].append(epoch_loss)

            if self.config.verbose:
                self._log_epoch(epoch, train_metrics)

            # Early stopping
            if self.config.early_stopping:
                if epoch_loss < self.best_loss - self.config.min_delta:
                    self.best_loss = epoch_loss
                    self.patience_counter = 0
                else:
                    self.patience_counter += 1
                    if self.patience_counter >= self.config.patience:
                        if self.config.verbose:
                            print(f"Early stopping at epoch {epoch + 1}")
                        break

        training_time = time.time() - start_time
        if self.config.verbose:
            print(f"Training completed in {training_time:.2f} seconds")

        return self.training_history

    def _log_step(self, step_idx: int, total_steps: int, metrics: Dict[str, float]) -> None:
        """Log step metrics."""
        msg = f"Epoch {self.epoch} [{step_idx}/{total_steps}]"
        msg += f" Loss: {metrics['loss']:.4f}"
        print(msg)

    def _log_epoch(self, epoch: int, train_metrics: Dict[str, float]) -> None:
        """Log epoch metrics."""
        msg = f"Epoch {epoch + 1}/{self.config.max_epochs}"
        msg += f" - Train Loss: {train_metrics['loss']:.4f}"
        print(msg)
