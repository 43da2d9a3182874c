"""
Change tracking for market objects.

Each mutable market object (curve, index, vol surface, global settings)
carries a sequence number. Mutations happen inside ``changing()``, which
bumps the sequence once on entry and once on exit: an odd sequence means a
change is in progress. Dependent calculations remember the sequences they
were computed from, refuse to start while an input is changing, and discard
any result whose inputs moved while it ran. No callback registration
between objects is needed.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Tuple


class Observable:
    """Base class for objects whose changes invalidate dependent results."""

    def __init__(self):
        self._sequence = 0
        self._change_depth = 0
        self._write_lock = threading.RLock()

    @property
    def version(self) -> int:
        """Number of completed changes."""
        return self._sequence // 2

    def is_changing(self) -> bool:
        """True while a change is being written."""
        return self._sequence % 2 == 1

    @contextmanager
    def changing(self) -> Iterator["Observable"]:
        """
        Context for mutating this object.

        Writers are serialised; nested blocks on the same thread count as
        one change.
        """
        with self._write_lock:
            self._change_depth += 1
            if self._change_depth == 1:
                self._sequence += 1
            try:
                yield self
            finally:
                self._change_depth -= 1
                if self._change_depth == 0:
                    self._sequence += 1

    def notify_observers(self) -> None:
        """Publish a change: every dependent result becomes stale."""
        with self.changing():
            pass

    def wait_for_writers(self) -> None:
        """
        Block until no other thread is changing this object.

        Raises:
            RuntimeError: If the calling thread is itself inside changing()
        """
        with self._write_lock:
            if self._change_depth:
                raise RuntimeError(f"{type(self).__name__} read while the same thread is changing it")

    def state_token(self) -> Tuple[int, ...]:
        """
        Token identifying the current state of this object and its inputs.

        Subclasses that depend on other observables extend the tuple.
        """
        return (self._sequence,)


__all__ = ["Observable"]
