"""VOW

A self-hosted deferred-value (promise) library. A ``DeferredValue`` settles
exactly once, runs the continuations registered on it in order, and chains
through continuations that may themselves return deferred values.
"""

from vow.deferred import DeferredValue, Resolvers
from vow.errors import (
    ChainingCycleError,
    InvalidLogLevelError,
    NotSettledError,
    RejectionError,
    VowError,
)
from vow.status import Status

__all__ = [
    "ChainingCycleError",
    "DeferredValue",
    "InvalidLogLevelError",
    "NotSettledError",
    "RejectionError",
    "Resolvers",
    "Status",
    "VowError",
    "__version__",
]
__version__ = "0.1.0"
