"""Training demo: fit y = a * x + b by minimizing squared error.

The network computes its own loss. Inputs are ``(x, y)`` rows, read with a
small custom layer. The residual is evaluated once per row and shared by both
factors of the square through ``Accumulate``.
"""

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np

import layertape as lt
from layertape.training import Trainer, TrainingConfig


class ColumnTape(lt.ValueTape):
    """Selects one entry of a vector tape."""

    def __init__(self, upstream, index):
        super().__init__(float(upstream.value[index]), upstream.is_trainable)
        self.upstream = upstream
        self.index = index

    def _force_backward(self, delta):
        def upstream_delta():
            full = np.zeros_like(self.upstream.value)
            full[self.index] = delta
            return full
        self.upstream.backward(upstream_delta)

    def _release(self):
        self.upstream.close()


class Column(lt.Layer):

    def __init__(self, index):
        self.index = index

    def forward(self, input_tape):
        return ColumnTape(input_tape.duplicate(), self.index)


def main():
    xs = np.linspace(-1.0, 1.0, 21)
    ys = 3.0 * xs - 0.5
    data = [np.array([x, y]) for x, y in zip(xs, ys)]

    a = lt.Weight(0.0, optimizer=lt.LearningRate(0.05), name="a")
    b = lt.Weight(0.0, optimizer=lt.LearningRate(0.05), name="b")

    prediction = lt.Plus(lt.Times(Column(0), a), b)
    residual = lt.Plus(prediction, lt.Negative(Column(1)))
    loss = lt.Compose(lt.Times(lt.Identity(), lt.Identity()), lt.Accumulate(residual))

    trainer = Trainer(loss, TrainingConfig(max_epochs=40, log_interval=20))
    history = trainer.train(data)

    print(f"\nFinal loss: {history['loss'][-1]:.6f}")
    print(f"a = {a.value:.4f}, b = {b.value:.4f}")


if __name__ == "__main__":
    main()
