"""Last-invocation-wins guard for asynchronous effects.

Each invocation takes an increasing ticket; when its work completes, the result
is applied only if no newer invocation has started in the meantime.
"""
from __future__ import annotations
from threading import Lock


class LatestOnly:
    def __init__(self):
        self._lock = Lock()
        self._current = 0

    def begin(self) -> int:
        with self._lock:
            self._current += 1
            return self._current

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._current

    def cancel(self) -> None:
        """Invalidate every outstanding ticket."""
        self.begin()


__all__ = ['LatestOnly']
