"""Completion bookkeeping for the ``DeferredValue.all`` combinator.

One ``AggregateState`` is created per aggregate and shared by the success
continuations of all of its entries. It owns the expected entry count, the
number of entries that have fulfilled so far, and an indexed results buffer,
so no continuation has to close over loose mutable variables.
"""

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AggregateState:
    """Shared progress of an aggregate over ``expected`` entries.

    Args:
        expected: The number of entries the aggregate waits for.
    """

    expected: int
    completed: int = field(default=0, init=False)
    _results: list[Any] = field(init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.expected < 0:
            raise ValueError(f"expected must be non-negative, got {self.expected}")
        self._results = [None] * self.expected

    def record(self, index: int, value: Any) -> bool:
        """Store the result of the entry at ``index``.

        Args:
            index: Position of the entry in the aggregate's input.
            value: The value the entry fulfilled with.

        Returns:
            True if this call completed the aggregate, False otherwise.
        """
        with self._lock:
            self._results[index] = value
            self.completed += 1
            return self.completed == self.expected

    @property
    def is_complete(self) -> bool:
        """Whether every entry has been recorded."""
        return self.completed == self.expected

    @property
    def results(self) -> list[Any]:
        """A copy of the results buffer, in input order."""
        with self._lock:
            return list(self._results)
