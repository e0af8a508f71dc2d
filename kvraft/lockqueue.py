"""A thread-safe FIFO queue whose reads block until data is available."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, Generic, TypeVar

T = TypeVar("T")


class LockQueue(Generic[T]):
    """Unbounded FIFO queue; many writers, blocking readers."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def push(self, item: T) -> None:
        """Append ``item`` and wake one waiting reader."""
        with self._cond:
            self._items.append(item)
            self._cond.notify()

    def pop(self) -> T:
        """Remove and return the oldest item, waiting as long as needed."""
        with self._cond:
            while not self._items:
                self._cond.wait()
            return self._items.popleft()

    def timeout_pop(self, timeout: int) -> T:
        """Remove and return the oldest item, waiting at most ``timeout`` ms.

        Raises ``TimeoutError`` if nothing arrives in time.
        """
        deadline = time.monotonic() + timeout / 1000
        with self._cond:
            while not self._items:
                remaining = deadline - time.monotonic()
                if remaining <= 0 or not self._cond.wait(remaining):
                    raise TimeoutError(f"no item within {timeout} ms")
            return self._items.popleft()