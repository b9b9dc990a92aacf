"""
Layer: a static, reusable description of a computation.

A network is a tree of layers built once. Each iteration evaluates the root
layer against a fresh input tape, which recursively evaluates the children and
produces a tree of tapes with the same shape. All per-evaluation state lives
in that tape tree, so one layer may be evaluated any number of times,
concurrently, without interference.

Ownership: the caller of ``forward`` keeps ownership of the input tape and
becomes the owner of the returned tape. A layer that keeps a tape it did not
create (for example, returning its input) must ``duplicate()`` it.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .tape import Tape

InputTape = TypeVar("InputTape", bound=Tape)
OutputTape = TypeVar("OutputTape", bound=Tape)


class Layer(ABC, Generic[InputTape, OutputTape]):
    """
    Abstract network node mapping an input tape to an output tape.

    The output tape's ``backward`` must call ``backward`` exactly once on every
    upstream tape it was built from, after computing its own gradient term.
    """

    @abstractmethod
    def forward(self, input_tape: InputTape) -> OutputTape:
        """
        Evaluate this layer.

        Args:
            input_tape: Tape holding the network input; still owned by the caller

        Returns:
            A new tape owned by the caller, who must close it
        """

    def __call__(self, input_tape: InputTape) -> OutputTape:
        return self.forward(input_tape)
