"""
Document Dispatchers - Serializing Mutations onto the Owning Context

The NoteDocument has no locks. Every mutation coming from outside its
owning context is wrapped in a zero-argument callable and handed to a
dispatcher, which runs the callables one at a time, in submission order,
on the owner.

Architecture:
    DocumentDispatcher (Protocol)
    ├── SerialDispatcher    → The editing surface owns the document and
    │                         calls drain() from its own event loop
    └── ThreadedDispatcher  → A dedicated worker thread owns the document

Both follow the same rule: a call made from the owning context runs
immediately, a call made anywhere else is queued and the caller continues
without waiting (fire-and-continue).

Failure handling:
    An action that raises is logged with its traceback and counted; the
    queue keeps going. Submitting to a stopped dispatcher raises
    DispatcherClosedError, which the InsertionBridge turns into a dropped
    write.
"""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Protocol, runtime_checkable

from loguru import logger

from structured_note.core.exceptions import BridgeError, DispatcherClosedError

Action = Callable[[], None]


# =============================================================================
# STAGE 1: PROTOCOL AND SHARED HELPERS
# =============================================================================


@runtime_checkable
class DocumentDispatcher(Protocol):
    """
    Marshals callables onto the context that owns a NoteDocument.

    Required Methods:
        is_owner_context() → True when called from the owning context
        submit(action)     → run now (owner) or enqueue (anyone else)
    """

    def is_owner_context(self) -> bool:
        ...

    def submit(self, action: Action) -> None:
        ...


@dataclass
class DispatcherStats:
    """Counters for dispatcher observability."""

    submitted: int = 0
    executed: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return {
            "submitted": self.submitted,
            "executed": self.executed,
            "failed": self.failed,
        }


def _execute(action: Action, name: str, stats: DispatcherStats) -> None:
    """Run one action; failures are logged and counted, never raised."""
    try:
        action()
    except Exception:
        stats.failed += 1
        logger.exception(f"Dispatcher '{name}' action failed")
    finally:
        stats.executed += 1


# =============================================================================
# STAGE 2: SERIAL DISPATCHER (CALLER-OWNED LOOP)
# =============================================================================


class SerialDispatcher:
    """
    FIFO queue drained by the thread that owns the document.

    What it does:
        Lets an editing surface that already runs its own event loop stay
        the document owner. Satellite threads submit, the surface calls
        ``drain()`` from its loop (for example on every tick).

    When to use:
        - Single-threaded hosts and tests (submit from the owner runs inline)
        - GUI toolkits that require all state changes on their main thread

    Args:
        name: Used in log messages
        owner: Thread that owns the document. Defaults to the thread that
            creates the dispatcher.
    """

    def __init__(self, name: str = "serial", owner: Optional[threading.Thread] = None):
        self._name = name
        self._owner_ident = (owner or threading.current_thread()).ident
        self._queue: Deque[Action] = deque()
        self._lock = threading.Lock()
        self._closed = False
        self._stats = DispatcherStats()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_closed(self) -> bool:
        return self._closed

    def is_owner_context(self) -> bool:
        return threading.get_ident() == self._owner_ident

    def submit(self, action: Action) -> None:
        """
        Run ``action`` now when called by the owner, otherwise enqueue it.

        Raises:
            DispatcherClosedError: After close()
        """
        with self._lock:
            if self._closed:
                raise DispatcherClosedError(self._name)
            self._stats.submitted += 1
            if not self.is_owner_context():
                self._queue.append(action)
                return
        _execute(action, self._name, self._stats)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)

    def drain(self, max_actions: Optional[int] = None) -> int:
        """
        Execute queued actions in submission order.

        Actions submitted while draining are picked up in the same call.

        Args:
            max_actions: Stop after this many actions (None = until empty)

        Returns:
            Number of actions executed

        Raises:
            BridgeError: If called from a thread other than the owner
        """
        if not self.is_owner_context():
            raise BridgeError(
                "drain() must be called from the owning thread",
                context={"dispatcher": self._name},
            )

        executed = 0
        while max_actions is None or executed < max_actions:
            with self._lock:
                if not self._queue:
                    break
                action = self._queue.popleft()
            _execute(action, self._name, self._stats)
            executed += 1
        return executed

    def close(self) -> int:
        """
        Stop accepting actions and discard anything still queued.

        Returns:
            Number of discarded actions
        """
        with self._lock:
            self._closed = True
            discarded = len(self._queue)
            self._queue.clear()
        if discarded:
            logger.warning(f"Dispatcher '{self._name}' closed with {discarded} pending action(s)")
        return discarded

    def stats(self) -> DispatcherStats:
        with self._lock:
            return DispatcherStats(**self._stats.to_dict())


# =============================================================================
# STAGE 3: THREADED DISPATCHER (OWNED WORKER THREAD)
# =============================================================================


class ThreadedDispatcher:
    """
    A worker thread that owns the document and drains the queue.

    What it does:
        Starts one daemon thread that executes submitted actions serially.
        The worker is the document's owning context, so actions submitted
        from inside another action run inline.

    Lifecycle:
        start()              → spawn the worker (idempotent)
        submit(action)       → enqueue; accepted before start()
        join_pending()       → block until the queue is empty and idle
        stop(wait=True)      → finish queued actions, then exit the worker

    Example:
        >>> with ThreadedDispatcher() as dispatcher:
        ...     dispatcher.submit(lambda: document.insert_line("text"))
        ...     dispatcher.join_pending(timeout=1.0)
    """

    def __init__(self, name: str = "note-document-owner"):
        self._name = name
        self._queue: Deque[Action] = deque()
        self._lock = threading.Lock()
        self._changed = threading.Condition(self._lock)
        self._thread: Optional[threading.Thread] = None
        self._busy = False
        self._stopping = False
        self._stats = DispatcherStats()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_closed(self) -> bool:
        return self._stopping

    def is_owner_context(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    # -------------------------------------------------------------------------
    # 3.1 Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> "ThreadedDispatcher":
        with self._lock:
            if self._stopping:
                raise DispatcherClosedError(self._name)
            if self._thread is not None:
                return self
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        logger.debug(f"Dispatcher '{self._name}' started")
        return self

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Stop accepting actions. Already queued actions still run.

        Args:
            wait: Join the worker thread (ignored when called from the worker)
            timeout: Maximum seconds to wait for the join
        """
        with self._changed:
            self._stopping = True
            self._changed.notify_all()
            thread = self._thread
        if wait and thread is not None and not self.is_owner_context():
            thread.join(timeout)
        logger.debug(f"Dispatcher '{self._name}' stopped")

    def __enter__(self) -> "ThreadedDispatcher":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop(wait=True)

    # -------------------------------------------------------------------------
    # 3.2 Submission
    # -------------------------------------------------------------------------

    def submit(self, action: Action) -> None:
        """
        Enqueue ``action``; runs inline when called from the worker.

        Raises:
            DispatcherClosedError: After stop()
        """
        with self._changed:
            if self._stopping:
                raise DispatcherClosedError(self._name)
            self._stats.submitted += 1
            if not self.is_owner_context():
                self._queue.append(action)
                self._changed.notify_all()
                return
        _execute(action, self._name, self._stats)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)

    def join_pending(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every queued action has run.

        Returns:
            True if the queue drained, False on timeout

        Raises:
            BridgeError: If called from the worker itself, or before start()
        """
        if self.is_owner_context():
            raise BridgeError(
                "join_pending() called from the dispatcher thread",
                context={"dispatcher": self._name},
            )
        if self._thread is None:
            raise BridgeError("Dispatcher not started", context={"dispatcher": self._name})
        with self._changed:
            return self._changed.wait_for(lambda: not self._queue and not self._busy, timeout)

    def stats(self) -> DispatcherStats:
        with self._lock:
            return DispatcherStats(**self._stats.to_dict())

    # -------------------------------------------------------------------------
    # 3.3 Worker loop
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        while True:
            with self._changed:
                while not self._queue and not self._stopping:
                    self._changed.wait()
                if not self._queue:
                    break
                action = self._queue.popleft()
                self._busy = True

            _execute(action, self._name, self._stats)

            with self._changed:
                self._busy = False
                self._changed.notify_all()

        with self._changed:
            self._changed.notify_all()
        logger.debug(f"Dispatcher '{self._name}' worker exited")
