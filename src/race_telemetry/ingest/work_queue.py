"""WorkQueue — single-writer, work-distributing frame queue.

Each published item goes to exactly ONE of the open subscriptions, whichever
pulls first.  This is work distribution, not broadcast: consumers that all
need every frame must each run their own pipeline or fan out above this
layer.
"""

from __future__ import annotations

import threading
import time
import weakref
from collections import deque
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

# Outcomes of a pull that yielded no item.
_ENDED = object()
_TIMED_OUT = object()


class PublishError(Exception):
    """Raised when nothing can ever receive a published item."""


class WorkQueue(Generic[T]):
    """Unbounded FIFO shared by one producer and any number of subscriptions.

    ``publish`` fails once the queue is closed, or once every subscription
    that was ever opened has been closed (or garbage collected).  Items
    published before the first subscription opens are kept for it.
    """

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._cond = threading.Condition()
        self._open_subscriptions = 0
        self._ever_subscribed = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return self._open_subscriptions

    def subscribe(self) -> Subscription[T]:
        """Open a new pulling end of the queue."""
        with self._cond:
            self._open_subscriptions += 1
            self._ever_subscribed = True
        return Subscription(self)

    def publish(self, item: T) -> None:
        """Append *item* for exactly one subscription to receive.

        Raises
        ------
        PublishError
            If the queue is closed or no subscription is left.
        """
        with self._cond:
            if self._closed:
                raise PublishError("queue is closed")
            if self._ever_subscribed and self._open_subscriptions == 0:
                raise PublishError("no subscriptions left")
            self._items.append(item)
            self._cond.notify()

    def close(self) -> None:
        """Stop accepting items; pullers drain what is left, then stop."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    # ------------------------------------------------------------------
    # Used by Subscription
    # ------------------------------------------------------------------

    def _release(self) -> None:
        with self._cond:
            self._open_subscriptions -= 1

    def _cancel(self, subscription: Subscription[T]) -> None:
        with self._cond:
            subscription._exhausted = True
            self._cond.notify_all()

    def _pull(self, subscription: Subscription[T], timeout: float | None):
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while True:
                # A cancelled subscription never takes an item.
                if subscription._exhausted:
                    return _ENDED
                if self._items:
                    return self._items.popleft()
                if self._closed:
                    return _ENDED
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return _TIMED_OUT
                self._cond.wait(remaining)


def _release(work_queue: WorkQueue) -> None:
    work_queue._release()


class Subscription(Generic[T]):
    """Blocking iterator over the items a :class:`WorkQueue` hands to it.

    Iteration ends when the queue is closed and drained, or when the
    subscription itself is closed; once ended it stays ended.  Closing from
    another thread wakes a blocked :meth:`get`.
    """

    def __init__(self, work_queue: WorkQueue[T]) -> None:
        self._queue = work_queue
        self._exhausted = False
        # Dropping the subscription without close() still releases it.
        self._finalizer = weakref.finalize(self, _release, work_queue)

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def get(self, timeout: float | None = None) -> T | None:
        """Return the next item, blocking up to *timeout* seconds (forever if None).

        Returns ``None`` on timeout and, permanently, after the stream ended.
        """
        item = self._queue._pull(self, timeout)
        if item is _TIMED_OUT:
            return None
        if item is _ENDED:
            self.close()
            return None
        return item

    def close(self) -> None:
        """Give up this subscription; the producer fails once none are left."""
        self._queue._cancel(self)
        self._finalizer()

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        item = self.get()
        if item is None:
            raise StopIteration
        return item

    def __enter__(self) -> Subscription[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
