"""Settlement status of a DeferredValue."""

from enum import Enum


class Status(Enum):
    """Enumeration of the states a DeferredValue can be in.

    ``PENDING`` is the only non-terminal state. A DeferredValue leaves it
    exactly once, for either ``FULFILLED`` or ``REJECTED``.
    """

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    @property
    def is_settled(self) -> bool:
        """Whether this status is terminal."""
        return self is not Status.PENDING
