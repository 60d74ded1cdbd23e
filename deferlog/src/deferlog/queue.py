"""Ordered buffer of deferred actions."""

import collections
import threading


class DeferredQueue:
    """FIFO of zero-argument actions, drained one at a time.

    Actions pushed while a flush is running are picked up by that same flush.
    """
    def __init__(self, items=(), lock=None):
        self._items = collections.deque(items)
        self._lock = lock if lock is not None else threading.RLock()

    def __len__(self):
        with self._lock:
            return len(self._items)

    def __repr__(self):
        return f"<DeferredQueue pending={len(self)}>"

    def push(self, *actions):
        """Append actions to the tail."""
        with self._lock:
            self._items.extend(actions)
        return self

    def pending(self):
        """Return a snapshot of queued actions."""
        with self._lock:
            return tuple(self._items)

    def flush(self, on_empty=None):
        """Run queued actions in order until the queue is empty.

        ``on_empty`` runs under the lock at the moment the queue is seen empty.
        Returns the number of actions executed.
        """
        count = 0
        while True:
            with self._lock:
                if not self._items:
                    if on_empty is not None:
                        on_empty()
                    return count
                action = self._items.popleft()
            action()
            count += 1
