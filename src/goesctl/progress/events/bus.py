import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable

from goesctl.model import ProgressEvent, ProgressEventType

log = logging.getLogger(__name__)

EventHandler = Callable[[ProgressEvent], None]


class EventBus:
    """
    Thread-safe event bus, fed by the download workers.
    """

    def __init__(self):
        self._handlers: list[EventHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    @contextmanager
    def subscribed(self, handler: EventHandler) -> Iterator[EventHandler]:
        """Keep `handler` subscribed for the duration of the block."""
        self.subscribe(handler)
        try:
            yield handler
        finally:
            self.unsubscribe(handler)

    def emit(self, event: ProgressEvent) -> None:
        # copy, so handlers can (un)subscribe while being notified
        with self._lock:
            handlers = self._handlers.copy()
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # a broken reporter must not fail the download emitting the event
                log.warning("Progress handler failed on %s: %s - %s", event.type.value, type(e).__name__, e)


# worker threads do not inherit context variables, a single process-wide bus is enough
_global_bus = EventBus()


def get_bus() -> EventBus:
    return _global_bus


def emit_event(event_type: ProgressEventType, task_id: str, **data) -> None:
    """
    Convenience function to emit events on the global bus.

    Args:
        event_type (ProgressEventType): event type.
        task_id (str): ID of the task to be tracked.
    """
    get_bus().emit(ProgressEvent(type=event_type, task_id=task_id, data=data))
