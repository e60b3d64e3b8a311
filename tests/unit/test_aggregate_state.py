"""Unit tests for the AggregateState bookkeeping object."""

import pytest

from vow.aggregate import AggregateState


def test_record_reports_completion_on_last_entry() -> None:
    """record() returns True exactly when the last entry is recorded."""
    state = AggregateState(3)
    assert state.record(2, "c") is False
    assert state.record(0, "a") is False
    assert state.record(1, "b") is True
    assert state.is_complete


def test_results_are_in_index_order() -> None:
    """Results are stored at their entry's index."""
    state = AggregateState(2)
    state.record(1, "second")
    state.record(0, "first")
    assert state.results == ["first", "second"]


def test_results_returns_a_copy() -> None:
    """Mutating the returned list does not touch the internal buffer."""
    state = AggregateState(1)
    state.record(0, "x")
    state.results.append("y")
    assert state.results == ["x"]


def test_unrecorded_slots_are_none() -> None:
    """Slots not yet recorded hold None."""
    state = AggregateState(2)
    state.record(1, "b")
    assert state.results == [None, "b"]
    assert not state.is_complete


def test_zero_entries_is_complete() -> None:
    """An aggregate over nothing is complete from the start."""
    state = AggregateState(0)
    assert state.is_complete
    assert state.results == []


def test_negative_expected_is_rejected() -> None:
    """A negative entry count is a programming error."""
    with pytest.raises(ValueError, match="expected must be non-negative, got -1"):
        AggregateState(-1)
