"""Basic usage example of the layertape library.

This example builds a small network, evaluates it, injects a gradient, and
shows how tapes are shared and closed.
"""

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import layertape as lt
from layertape.autodiff import value_and_grad


def demonstrate_forward_backward():
    """Evaluate (1.0 + x) * w and update w."""
    print("=== Forward and Backward ===\n")

    w = lt.Weight(2.0, optimizer=lt.LearningRate(0.1), name="w")
    network = lt.Times(lt.Plus(lt.Literal(1.0), lt.Identity()), w)

    with lt.LiteralTape(3.0) as x:
        with network.forward(x) as output:
            print(f"(1.0 + 3.0) * 2.0 = {output.value}")
            print(f"Output trainable: {output.is_trainable}")
            output.backward(1.0)

    print(f"w after one step: {w.value:.3f}")


def demonstrate_short_circuit():
    """Backward on constants never computes the delta."""
    print("\n=== Untrainable Short-Circuit ===\n")

    def expensive_delta():
        raise RuntimeError("never called")

    with lt.LiteralTape(5.0) as constant:
        constant.backward(expensive_delta)
        print(f"Constant still holds {constant.value}")


def demonstrate_duplicates():
    """Duplicates share one computation and are closed independently."""
    print("\n=== Duplicates ===\n")

    tape = lt.LiteralTape(3.0)
    dup = tape.duplicate()
    print(f"Open handles: {tape.reference_count}")
    tape.close()
    print(f"Duplicate still readable after closing original: {dup.value}")
    dup.close()
    print(f"Open handles: {tape.reference_count}")


def demonstrate_gradients():
    """Differentiate with respect to the input."""
    print("\n=== Input Gradients ===\n")

    square = lt.Times(lt.Identity(), lt.Identity())
    f = lt.Compose(square, lt.Plus(lt.Identity(), lt.Literal(1.0)))
    for x in (-1.0, 0.0, 2.0):
        value, gradient = value_and_grad(f)(x)
        print(f"f({x}) = {value}, f'({x}) = {gradient}")


if __name__ == "__main__":
    demonstrate_forward_backward()
    demonstrate_short_circuit()
    demonstrate_duplicates()
    demonstrate_gradients()
