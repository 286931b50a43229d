from __future__ import annotations

from typing import Any, Callable

# Event types emitted by DragSession, with the keyword data each carries.
GESTURE_START = "gesture.start"        # element_id, kind
GESTURE_PREVIEW = "gesture.preview"    # element_id, destination
GESTURE_COMMIT = "gesture.commit"      # element_id, destination, changed
GESTURE_CANCEL = "gesture.cancel"      # element_id

GESTURE_EVENTS = (GESTURE_START, GESTURE_PREVIEW, GESTURE_COMMIT, GESTURE_CANCEL)


class EventBus:
    """Synchronous publish/subscribe bus for drag gesture events.

    Handlers receive the event data as keyword arguments and run in
    subscription order, inside the session call that emitted the event.
    Gestures are single-threaded, so there is no locking.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {}

    def subscribe(self, event_type: str, handler: Callable[..., Any]) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def clear(self, event_type: str | None = None) -> None:
        """Drop all handlers, or only those of *event_type*."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def emit(self, event_type: str, **data: Any) -> None:
        # Copy so a handler may unsubscribe itself while being called.
        for handler in list(self._handlers.get(event_type, [])):
            handler(**data)

