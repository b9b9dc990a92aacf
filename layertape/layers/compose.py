"""Layer composition: feed one layer's output into another."""

from dataclasses import dataclass

from ..core import AccumulatingTape, Layer, Tape


@dataclass(frozen=True)
class Compose(Layer):
    """
    ``outer(inner(x))``.

    ``inner`` is evaluated first and its tape becomes ``outer``'s input. The
    intermediate tape is closed before returning; ``outer`` keeps a duplicate
    wherever it needs one. On backward, ``outer``'s output routes its delta
    first, and ``inner``'s output is reached through it afterwards.
    """

    outer: Layer
    inner: Layer

    def forward(self, input_tape: Tape) -> Tape:
        with self.inner.forward(input_tape) as intermediate:
            return self.outer.forward(intermediate)


@dataclass(frozen=True)
class Accumulate(Layer):
    """
    Marks a subexpression whose output is consumed more than once.

    The wrapped layer's tape is placed behind an ``AccumulatingTape``: deltas
    arriving through any duplicate are summed and sent upstream in one call
    once every holder has closed.

    A layer referenced twice in a tree is evaluated twice. To evaluate it once
    and share the result, make it the inner layer of a ``Compose`` whose outer
    layer reads its input through several ``Identity`` placeholders:

        square_of_residual = Compose(Times(Identity(), Identity()), Accumulate(residual))
    """

    layer: Layer

    def forward(self, input_tape: Tape) -> AccumulatingTape:
        upstream = self.layer.forward(input_tape)
        try:
            return AccumulatingTape(upstream)
        except Exception:
            upstream.close()
            raise
