"""
Listener registry shared by the stores.
"""
import threading
from typing import Callable, List

from ..utils.logger import get_logger

Listener = Callable[[], None]


class Observable:
    """Notifies dependents after the store's snapshot has been replaced."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._listeners_lock = threading.Lock()
        self._observer_logger = get_logger("observable")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that removes the listener
        """
        with self._listeners_lock:
            self._listeners.append(listener)

        def _unsubscribe():
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                self._observer_logger.error("Store listener failed",
                                            store=type(self).__name__, error=str(e))
