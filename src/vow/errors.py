"""Error definitions for the vow library.

Rejection reasons themselves are opaque and never need to be exceptions. The
classes here describe misuse of the library (asking a pending value for its
outcome, building a chaining cycle) and are also used to surface non-exception
reasons through the synchronous ``result()`` accessor.
"""

from typing import Any

# ============================================================================
#                           General library errors
# ============================================================================


class VowError(Exception):
    """Base class for vow errors."""


class NotSettledError(VowError):
    """Raised when the outcome of a pending DeferredValue is requested."""

    def __init__(self, deferred: object) -> None:
        super().__init__(f"{deferred!r} has not settled yet.")
        self.deferred = deferred


class RejectionError(VowError):
    """Raised by ``result()`` when the rejection reason is not an exception."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"DeferredValue was rejected with {reason!r}.")
        self.reason = reason


class ChainingCycleError(VowError, TypeError):
    """Raised when a continuation returns the DeferredValue it is settling."""

    def __init__(self, deferred: object) -> None:
        super().__init__(f"Chaining cycle detected for {deferred!r}.")
        self.deferred = deferred


# ============================================================================
#                           Configuration errors
# ============================================================================


class InvalidLogLevelError(VowError, ValueError):
    """Raised when the configured log level is not a known logging level."""

    def __init__(self, env_var: str, value: str) -> None:
        super().__init__(f"Invalid log level in {env_var}: {value!r}.")
        self.env_var = env_var
        self.value = value
