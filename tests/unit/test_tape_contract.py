"""Unit tests for the tape contract: short-circuit, duplicates and release."""

import pytest

from layertape import DuplicateTape, LiteralTape, Tape, ValueTape


class CountingTape(ValueTape):
    """Tape recording every delta its backward routine receives."""

    def __init__(self, value, is_trainable=True):
        super().__init__(value, is_trainable)
        self.deltas = []
        self.release_count = 0

    def _force_backward(self, delta):
        self.deltas.append(delta)

    def _release(self):
        self.release_count += 1


def exploding_delta():
    raise AssertionError("delta must not be evaluated")


class TestShortCircuit:
    """Backward on untrainable tapes never does gradient work."""

    def test_scenario_a_constant_leaf(self):
        tape = LiteralTape(5.0)
        assert not tape.is_trainable
        tape.backward("anything")
        tape.backward(None)
        assert tape.value == 5.0
        tape.close()

    def test_untrainable_never_evaluates_lazy_delta(self):
        with CountingTape(1.0, is_trainable=False) as tape:
            tape.backward(exploding_delta)
            assert tape.deltas == []

    def test_trainable_evaluates_lazy_delta(self):
        with CountingTape(1.0) as tape:
            tape.backward(lambda: 2.5)
            assert tape.deltas == [2.5]

    def test_trainable_accepts_plain_delta(self):
        with CountingTape(1.0) as tape:
            tape.backward(3.0)
            assert tape.deltas == [3.0]

    def test_backward_errors_propagate_unchanged(self):
        class FailingTape(CountingTape):
            def _force_backward(self, delta):
                raise ValueError("backend failure")

        with FailingTape(1.0) as tape:
            with pytest.raises(ValueError, match="backend failure"):
                tape.backward(1.0)


class TestDuplicate:
    """Duplicates share value and backward behavior, not disposal."""

    def test_duplicate_shares_value(self):
        tape = CountingTape(3.0)
        dup = tape.duplicate()
        assert isinstance(dup, DuplicateTape)
        assert dup.value == tape.value
        assert dup.is_trainable == tape.is_trainable
        dup.close()
        tape.close()

    def test_scenario_b_each_duplicate_triggers_routine(self):
        tape = CountingTape(3.0)
        h1 = tape.duplicate()
        h2 = tape.duplicate()
        h1.backward(1.0)
        h2.backward(1.0)
        assert tape.deltas == [1.0, 1.0]
        h1.close()
        h2.close()
        tape.close()

    def test_closing_original_keeps_duplicate_usable(self):
        tape = CountingTape(3.0)
        dup = tape.duplicate()
        tape.close()
        assert dup.value == 3.0
        dup.backward(2.0)
        assert tape.deltas == [2.0]
        assert tape.release_count == 0
        dup.close()
        assert tape.release_count == 1

    def test_closing_duplicate_keeps_original_usable(self):
        tape = CountingTape(3.0)
        dup = tape.duplicate()
        dup.close()
        assert tape.value == 3.0
        tape.backward(1.0)
        assert tape.deltas == [1.0]
        tape.close()
        assert tape.release_count == 1

    def test_release_after_last_holder(self):
        tape = CountingTape(1.0)
        dups = [tape.duplicate() for _ in range(3)]
        assert tape.reference_count == 4
        tape.close()
        for i, dup in enumerate(dups):
            assert tape.release_count == 0
            dup.close()
            assert tape.reference_count == 3 - i - 1
        assert tape.release_count == 1

    def test_duplicate_of_duplicate_shares_origin(self):
        tape = CountingTape(1.0)
        dup = tape.duplicate()
        dup2 = dup.duplicate()
        dup2.backward(4.0)
        assert tape.deltas == [4.0]
        for handle in (tape, dup, dup2):
            handle.close()
        assert tape.release_count == 1

    def test_each_handle_flags_double_close(self):
        tape = CountingTape(1.0)
        dup = tape.duplicate()
        dup.close()
        with pytest.raises(AssertionError):
            dup.close()
        tape.close()
        with pytest.raises(AssertionError):
            tape.close()

    def test_untrainable_duplicate_short_circuits(self):
        tape = LiteralTape(7.0)
        dup = tape.duplicate()
        dup.backward(exploding_delta)
        dup.close()
        tape.close()


class TestTapeIsAbstract:
    """Variants must supply the full contract."""

    def test_incomplete_variant_cannot_be_instantiated(self):
        class Incomplete(Tape):
            @property
            def value(self):
                return 1.0

        with pytest.raises(TypeError):
            Incomplete()

    def test_variant_cannot_override_backward(self):
        with pytest.raises(TypeError, match="_force_backward"):
            class Bypassing(CountingTape):
                def backward(self, delta):
                    self.deltas.append(delta)
