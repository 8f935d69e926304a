import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = ['DATA_LOADED', 'STATE_COMMITTED', 'Event', 'EventBus']

logger = logging.getLogger(__name__)

DATA_LOADED = "DATA_LOADED"
STATE_COMMITTED = "STATE_COMMITTED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Any]


class EventBus:
    """In-process publish/subscribe; handlers run synchronously in subscription order.

    A handler that raises propagates out of publish and skips later handlers.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)

    def publish(self, name: str, payload: dict) -> List[Any]:
        handlers = list(self._subscribers.get(name, []))
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("publish %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]
