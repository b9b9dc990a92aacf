"""Unit tests for fan-in accumulation through AccumulatingTape."""

import numpy as np
import pytest

from layertape import Accumulate, AccumulatingTape, Compose, Identity, LiteralTape, Plus, Times, ValueTape
from layertape.autodiff import value_and_grad


class CountingTape(ValueTape):

    def __init__(self, value, is_trainable=True):
        super().__init__(value, is_trainable)
        self.deltas = []

    def _force_backward(self, delta):
        self.deltas.append(delta)


class TestAccumulatingTape:
    """Contributions from every holder are summed and sent once."""

    def test_sum_sent_once_after_last_close(self):
        upstream = CountingTape(3.0)
        shared = AccumulatingTape(upstream)
        h1 = shared.duplicate()
        h2 = shared.duplicate()

        h1.backward(1.0)
        h2.backward(2.0)
        assert upstream.deltas == []
        assert shared.pending_delta == 3.0

        h1.close()
        h2.close()
        assert upstream.deltas == []
        shared.close()

        assert upstream.deltas == [3.0]
        assert upstream.closed

    def test_nothing_sent_without_contributions(self):
        upstream = CountingTape(3.0)
        shared = AccumulatingTape(upstream)
        shared.close()
        assert upstream.deltas == []
        assert upstream.closed

    def test_untrainable_upstream_short_circuits(self):
        upstream = LiteralTape(3.0)
        shared = AccumulatingTape(upstream)
        shared.backward(lambda: pytest.fail("delta evaluated"))
        assert shared.pending_delta is None
        shared.close()
        assert upstream.closed

    def test_array_contributions(self):
        upstream = CountingTape(np.zeros(2))
        shared = AccumulatingTape(upstream)
        dup = shared.duplicate()
        shared.backward(np.array([1.0, 2.0]))
        dup.backward(np.array([0.5, 0.5]))
        dup.close()
        shared.close()
        np.testing.assert_allclose(upstream.deltas[0], [1.5, 2.5])

    def test_upstream_closed_even_if_backward_fails(self):
        class FailingTape(CountingTape):
            def _force_backward(self, delta):
                raise RuntimeError("upstream failure")

        upstream = FailingTape(1.0)
        shared = AccumulatingTape(upstream)
        shared.backward(1.0)
        with pytest.raises(RuntimeError, match="upstream failure"):
            shared.close()
        assert upstream.closed


class TestAccumulateLayer:
    """Accumulate changes how often upstream is called, not the gradient."""

    def test_shared_subexpression_gradient(self):
        # s = x * x is evaluated once and used twice: f = s + s
        network = Compose(Plus(Identity(), Identity()), Accumulate(Times(Identity(), Identity())))
        value, gradient = value_and_grad(network)(3.0)
        assert value == 18.0
        assert gradient == 12.0

    def test_shared_subexpression_reaches_upstream_once(self):
        calls = []

        class Probe(CountingTape):
            def _force_backward(self, delta):
                calls.append(delta)

        network = Compose(Plus(Identity(), Identity()), Accumulate(Identity()))
        with Probe(3.0) as x:
            with network.forward(x) as out:
                out.backward(1.0)
                assert calls == []
        assert calls == [2.0]

    def test_without_accumulate_each_consumer_reaches_upstream(self):
        calls = []

        class Probe(CountingTape):
            def _force_backward(self, delta):
                calls.append(delta)

        network = Compose(Plus(Identity(), Identity()), Identity())
        with Probe(3.0) as x:
            with network.forward(x) as out:
                out.backward(1.0)
        assert calls == [1.0, 1.0]

    def test_single_upstream_call_per_evaluation(self):
        calls = []

        class Probe(CountingTape):
            def _force_backward(self, delta):
                calls.append(delta)

        shared_layer = Accumulate(Identity())
        with Probe(2.0) as x:
            shared = shared_layer.forward(x)
            consumers = [shared.duplicate() for _ in range(3)]
            for consumer in consumers:
                consumer.backward(1.0)
                consumer.close()
            assert calls == []
            shared.close()
        assert calls == [3.0]
