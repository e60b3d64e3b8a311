"""The DeferredValue container.

A ``DeferredValue`` holds an outcome that is not known yet. It starts out
pending and settles exactly once, either fulfilled with a value or rejected
with a reason. Consumers register continuations with ``then``, ``catch`` and
``finally_``; each registration returns a new ``DeferredValue`` computed from
the continuation's return value, so calls can be chained fluently.

Everything here is synchronous. Continuations registered while pending run
in registration order before the settling call returns. Continuations
registered after settlement run immediately, inside the registration call.
There is no scheduler, timer or task queue.

Settlement is drained iteratively: a settlement that happens while another
settlement on the same thread is still running its continuations appends its
own continuations to that thread's work queue instead of calling them
nested. The outermost settling call runs the queue until it is empty, so
chains of any length settle in constant stack depth.

Example:
    ```py
    d = DeferredValue(lambda resolve, reject: resolve(2))
    d.then(lambda v: v * 3).then(print)  # prints 6
    ```
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any, Generic, NamedTuple, TypeVar

from vow.aggregate import AggregateState
from vow.errors import ChainingCycleError, NotSettledError, RejectionError
from vow.status import Status

logger = logging.getLogger(__name__)

# pylint: disable=protected-access

T = TypeVar("T")

Resolve = Callable[[Any], None]
"""Capability that fulfills a DeferredValue with a value."""

Reject = Callable[[Any], None]
"""Capability that rejects a DeferredValue with a reason."""

Setup = Callable[[Resolve, Reject], Any]
"""Routine handed both settle capabilities when a DeferredValue is built."""

_UNSET = object()


def _identity(value: Any) -> Any:
    return value


def _noop(resolve: Resolve, reject: Reject) -> None:  # pylint: disable=unused-argument
    pass


def _callable_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


class _SettlementQueue(threading.local):
    """Per-thread queue of continuations waiting to run after a settlement."""

    def __init__(self) -> None:
        self.work: deque[tuple[Callable[[Any], None], Any]] = deque()
        self.draining = False

    def run(self, callbacks: list[Callable[[Any], None]], outcome: Any) -> None:
        """Run ``callbacks`` with ``outcome`` after any work already queued.

        Only the outermost call on a thread drains the queue; nested calls
        just enqueue, which keeps the stack flat for long chains.
        """
        self.work.extend((callback, outcome) for callback in callbacks)
        if self.draining:
            return
        self.draining = True
        try:
            while self.work:
                callback, value = self.work.popleft()
                callback(value)
        finally:
            self.draining = False
            self.work.clear()


_settlements = _SettlementQueue()


class Resolvers(NamedTuple):
    """A pending DeferredValue bundled with its two settle capabilities."""

    deferred: DeferredValue[Any]
    resolve: Resolve
    reject: Reject


class _Continuation:
    """Queue entry that runs a user continuation and settles a successor.

    The successor is fulfilled with the continuation's plain return value,
    rejected with anything the continuation raises, or made to mirror a
    DeferredValue the continuation returns.
    """

    __slots__ = ("callback", "successor")

    def __init__(
        self, callback: Callable[[Any], Any], successor: DeferredValue[Any]
    ) -> None:
        self.callback = callback
        self.successor = successor

    def __call__(self, outcome: Any) -> None:
        successor = self.successor
        try:
            result = self.callback(outcome)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug(
                "Continuation %s raised, rejecting %r",
                _callable_name(self.callback),
                successor,
                exc_info=True,
            )
            successor._reject(exc)
            return

        if result is successor:
            successor._reject(ChainingCycleError(successor))
        elif isinstance(result, DeferredValue):
            # Flatten by wiring the successor's own capabilities onto the
            # returned value; no intermediate DeferredValue is created.
            result._subscribe(successor._resolve, successor._reject)
        else:
            successor._resolve(result)


class DeferredValue(Generic[T]):
    """A container for an outcome that settles exactly once.

    Args:
        setup: Called synchronously with ``(resolve, reject)``. The first call
            to either capability settles the instance; later calls are
            ignored. If ``setup`` raises, the instance is rejected with the
            raised exception instead of the error propagating.
    """

    def __init__(self, setup: Setup) -> None:
        self._status: Status = Status.PENDING
        self._outcome: Any = _UNSET
        self._on_fulfilled: list[Callable[[Any], None]] = []
        self._on_rejected: list[Callable[[Any], None]] = []
        self._lock = threading.Lock()

        try:
            setup(self._resolve, self._reject)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Setup routine for %r raised", self, exc_info=True)
            self._reject(exc)

    # --- Construction Paths ---

    @classmethod
    def resolve(cls, value: T) -> DeferredValue[T]:
        """Return a DeferredValue already fulfilled with ``value``.

        ``value`` is stored as-is, even when it is itself a DeferredValue.
        Route it through ``then()`` to have it flattened.
        """
        return cls(lambda resolve, _reject: resolve(value))

    @classmethod
    def reject(cls, reason: Any) -> DeferredValue[Any]:
        """Return a DeferredValue already rejected with ``reason``."""
        return cls(lambda _resolve, reject: reject(reason))

    @classmethod
    def with_resolvers(cls) -> Resolvers:
        """Return a pending DeferredValue together with its capabilities.

        Useful for producers that learn the outcome somewhere other than a
        setup routine, such as an I/O completion callback.
        """
        deferred = cls(_noop)
        return Resolvers(deferred, deferred._resolve, deferred._reject)

    @classmethod
    def all(cls, items: Iterable[Any]) -> DeferredValue[list[Any]]:
        """Wait for every entry of ``items`` to fulfill.

        Entries may be DeferredValues or plain values; plain values count as
        already fulfilled.

        Args:
            items: The entries to wait for. Consumed once.

        Returns:
            A DeferredValue fulfilled with the list of results in input order,
            or rejected with the reason of the first entry observed to reject.
        """

        def setup(resolve: Resolve, reject: Reject) -> None:
            entries = [
                item if isinstance(item, DeferredValue) else cls.resolve(item)
                for item in items
            ]
            state = AggregateState(len(entries))
            if state.is_complete:
                resolve([])
                return

            def watch(index: int, entry: DeferredValue[Any]) -> None:
                def on_fulfilled(value: Any) -> None:
                    if state.record(index, value):
                        logger.debug(
                            "Aggregate fulfilled with %d results", state.expected
                        )
                        resolve(state.results)

                def on_rejected(reason: Any) -> None:
                    logger.debug("Aggregate entry %d rejected with %r", index, reason)
                    reject(reason)

                entry.then(on_fulfilled, on_rejected)

            for index, entry in enumerate(entries):
                watch(index, entry)

        return cls(setup)

    # --- Settlement ---

    def _resolve(self, value: Any) -> None:
        self._settle(Status.FULFILLED, value)

    def _reject(self, reason: Any) -> None:
        self._settle(Status.REJECTED, reason)

    def _settle(self, status: Status, outcome: Any) -> None:
        with self._lock:
            current = self._status
            if not current.is_settled:
                self._status = status
                self._outcome = outcome
                if status is Status.FULFILLED:
                    callbacks = self._on_fulfilled
                else:
                    callbacks = self._on_rejected
                self._on_fulfilled = []
                self._on_rejected = []

        if current.is_settled:
            logger.debug(
                "Ignoring attempt to mark %r as %s: already settled", self, status.value
            )
            return

        if status is Status.FULFILLED:
            logger.debug("%r fulfilled", self)
        else:
            logger.debug("%r rejected", self)

        # Invoked outside the lock so continuations may touch this instance.
        _settlements.run(callbacks, outcome)

    def _subscribe(
        self,
        on_fulfilled: Callable[[Any], None],
        on_rejected: Callable[[Any], None],
    ) -> None:
        """Queue a pair of handlers, or run one now if already settled."""
        with self._lock:
            if not self._status.is_settled:
                self._on_fulfilled.append(on_fulfilled)
                self._on_rejected.append(on_rejected)
                return
            status, outcome = self._status, self._outcome

        if status is Status.FULFILLED:
            on_fulfilled(outcome)
        else:
            on_rejected(outcome)

    # --- Chaining ---

    def then(
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[Any], Any] | None = None,
    ) -> DeferredValue[Any]:
        """Register continuations and return the DeferredValue they produce.

        Args:
            on_fulfilled: Called with the value if this instance fulfills.
                None passes the value through.
            on_rejected: Called with the reason if this instance rejects.
                None passes the rejection through unchanged.

        Anything other than None is called as given. A non-callable argument
        therefore rejects the successor with ``TypeError`` once its branch
        runs.

        Returns:
            A new DeferredValue. It fulfills with the continuation's return
            value, rejects with anything the continuation raises, or mirrors
            the outcome of a DeferredValue the continuation returns.
        """
        successor: DeferredValue[Any] = type(self).with_resolvers().deferred
        if on_fulfilled is None:
            on_fulfilled = _identity
        fulfilled_handler = _Continuation(on_fulfilled, successor)
        if on_rejected is None:
            rejected_handler: Callable[[Any], None] = successor._reject
        else:
            rejected_handler = _Continuation(on_rejected, successor)
        self._subscribe(fulfilled_handler, rejected_handler)
        return successor

    def catch(self, on_rejected: Callable[[Any], Any]) -> DeferredValue[Any]:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    def finally_(self, on_settled: Callable[[], Any]) -> DeferredValue[T]:
        """Run ``on_settled`` once this instance settles, keeping its outcome.

        ``on_settled`` takes no arguments and its return value is discarded.
        A DeferredValue it returns is not waited for and its outcome is
        ignored. The returned DeferredValue settles with this instance's value
        or reason, unless ``on_settled`` raises, in which case it is rejected
        with that exception.
        """
        cls = type(self)

        def cleanup() -> DeferredValue[Any]:
            return cls.resolve(on_settled())

        def after_fulfilled(value: T) -> DeferredValue[T]:
            return cleanup().then(lambda _: value)

        def after_rejected(reason: Any) -> DeferredValue[Any]:
            return cleanup().then(lambda _: cls.reject(reason))

        return self.then(after_fulfilled, after_rejected)

    # --- Inspection ---

    @property
    def status(self) -> Status:
        """The current settlement status."""
        return self._status

    @property
    def is_pending(self) -> bool:
        return self._status is Status.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._status is Status.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self._status is Status.REJECTED

    @property
    def outcome(self) -> Any:
        """The settled value or reason.

        Raises:
            NotSettledError: If this instance is still pending.
        """
        if self._status is Status.PENDING:
            raise NotSettledError(self)
        return self._outcome

    def result(self) -> T:
        """Return the value, or raise the reason, of a settled instance.

        Returns:
            The value this instance fulfilled with.

        Raises:
            NotSettledError: If this instance is still pending.
            RejectionError: If it was rejected with a reason that is not an
                exception. The reason is available as ``.reason``.
            Exception: The reason itself, if it was rejected with an exception.
        """
        outcome = self.outcome
        if self._status is Status.FULFILLED:
            return outcome
        if isinstance(outcome, BaseException):
            raise outcome
        raise RejectionError(outcome)

    def __repr__(self) -> str:
        name = type(self).__name__
        if self._status is Status.PENDING:
            return f"<{name} pending>"
        return f"<{name} {self._status.value}: {self._outcome!r}>"
