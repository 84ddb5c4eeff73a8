"""Thread synchronisation helpers: a shared value holder and an owned reentrant lock."""

from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class AutoStructure(Generic[T]):
    """Holds one shared value that many threads may read and replace."""

    def __init__(self, value: Optional[T] = None) -> None:
        self._lock = threading.Lock()
        self._main = value

    def get(self) -> Optional[T]:
        """Return the current value."""
        with self._lock:
            return self._main

    def set(self, value: Optional[T]) -> None:
        """Replace the current value."""
        with self._lock:
            self._main = value


class CriticalSection:
    """Reentrant lock that remembers which thread entered it with ``with``.

    ``try_unlock`` lets the owning thread release early; the pending
    ``__exit__`` then does nothing.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._owner: Optional[int] = None
        self._depth = 0

    @property
    def owner(self) -> Optional[int]:
        """Thread id of the thread holding the section through ``with``, if any."""
        return self._owner

    def lock(self) -> None:
        """Acquire the section, blocking until it is free."""
        self._lock.acquire()

    def unlock(self) -> None:
        """Release one acquisition; raises RuntimeError if not held by this thread."""
        self._lock.release()

    def try_unlock(self) -> bool:
        """Release the section if this thread owns it; return whether it did."""
        if self._owner != threading.get_ident():
            return False
        depth = self._depth
        self._owner = None
        self._depth = 0
        for _ in range(depth):
            self._lock.release()
        return True

    def __enter__(self) -> "CriticalSection":
        self._lock.acquire()
        me = threading.get_ident()
        if self._owner == me:
            self._depth += 1
        else:
            self._owner = me
            self._depth = 1
        return self

    def __exit__(self, *args) -> None:
        if self._owner != threading.get_ident():
            return
        self._depth -= 1
        if self._depth == 0:
            self._owner = None
        self._lock.release()