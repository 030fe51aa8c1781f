"""Configuration change notifications.

Listeners register per event and are called with the event payload: the
newly composed property set for CONFIG_REFRESH, the exception for
CONFIG_ERROR. Listeners may be plain callables or coroutine functions.
"""

import inspect
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

from springconf.observability.logging import get_logger

logger = get_logger(__name__)

EventListener = Callable[[Any], Any]


class ConfigEvent(str, Enum):
    """Events raised by a configuration instance."""

    CONFIG_REFRESH = "config.refresh"
    CONFIG_ERROR = "config.error"


class EventEmitter:
    """Registry of listeners per ConfigEvent.

    A failing listener is logged and does not prevent the remaining
    listeners from running.
    """

    def __init__(self) -> None:
        self._listeners: dict[ConfigEvent, list[EventListener]] = defaultdict(list)

    def on(self, event: ConfigEvent | str, listener: EventListener) -> None:
        """Register a listener for an event."""
        event = ConfigEvent(event)
        self._listeners[event].append(listener)
        logger.debug(
            "event_listener_registered",
            event_type=event.value,
            total_listeners=len(self._listeners[event]),
        )

    def off(self, event: ConfigEvent | str, listener: EventListener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        event = ConfigEvent(event)
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            logger.warning("event_listener_not_found", event_type=event.value)

    def listener_count(self, event: ConfigEvent | str) -> int:
        return len(self._listeners[ConfigEvent(event)])

    async def emit(self, event: ConfigEvent, payload: Any) -> None:
        """Call every listener registered for the event, in registration order."""
        for listener in list(self._listeners[event]):
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    "event_listener_failed",
                    event_type=event.value,
                    error=str(e),
                )
