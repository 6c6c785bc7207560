"""In-process change notifications for live queries."""

import itertools
import logging
import threading
from typing import Callable, Dict

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class ChangeFeed:
    """Per-collection listener registry.

    ``publish`` runs every listener of a collection in the writer's thread.
    A failing listener is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._listeners: Dict[str, Dict[int, Listener]] = {}

    def subscribe(self, collection: str, listener: Listener) -> Unsubscribe:
        with self._lock:
            listener_id = next(self._ids)
            self._listeners.setdefault(collection, {})[listener_id] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.get(collection, {}).pop(listener_id, None)

        return unsubscribe

    def publish(self, collection: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get(collection, {}).values())

        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Listener on %s failed", collection)

    def listener_count(self, collection: str) -> int:
        with self._lock:
            return len(self._listeners.get(collection, {}))
