"""
Process-wide settings.

Holds the global evaluation date. Changing it publishes a change
notification through the usual version counter, which invalidates every
stripper and any surface whose reference date floats with it.
"""

import threading
from datetime import date
from typing import Optional

from .observable import Observable


class Settings(Observable):
    """
    Global settings singleton.

    Use Settings.instance() rather than constructing directly.
    """

    _instance: Optional["Settings"] = None
    _instance_lock = threading.Lock()

    def __init__(self):
        super().__init__()
        self._evaluation_date: Optional[date] = None

    @classmethod
    def instance(cls) -> "Settings":
        """Return the process-wide settings object."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @property
    def evaluation_date(self) -> date:
        """Evaluation date; defaults to today when never set."""
        if self._evaluation_date is None:
            return date.today()
        return self._evaluation_date

    @evaluation_date.setter
    def evaluation_date(self, d: date) -> None:
        if d != self._evaluation_date:
            with self.changing():
                self._evaluation_date = d

    def reset(self) -> None:
        """Clear the evaluation date (back to today)."""
        if self._evaluation_date is not None:
            with self.changing():
                self._evaluation_date = None


__all__ = ["Settings"]
