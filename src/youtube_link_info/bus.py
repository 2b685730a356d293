"""In-process publish/subscribe bus and the reply-queue interface.

The plugin only depends on two narrow seams: something with
``emit(event, *args)`` to hand requests to a transport, and a
``MessageQueue`` to send replies. ``EventBus`` is a minimal host that
provides the first; bots embedding the plugin can use their own.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Emitter(Protocol):
    """Anything that can publish a named event."""

    def emit(self, event: str, *args: Any) -> None: ...


class MessageQueue(Protocol):
    """Outbound side of the host: sends text to a reply destination."""

    def send_message(self, destination: str, text: str) -> None: ...


class EventBus:
    """Synchronous named-event dispatcher.

    Handlers run in subscription order on the caller's thread; an
    exception in a handler propagates to whoever emitted.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> None:
        """Subscribe *handler* to *event*."""
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        """Unsubscribe *handler*; unknown handlers are ignored."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listeners(self, event: str) -> list[Handler]:
        return list(self._handlers.get(event, []))

    def emit(self, event: str, *args: Any) -> None:
        """Call every handler subscribed to *event* with *args*."""
        handlers = self.listeners(event)
        if not handlers:
            logger.debug("No listeners for %s", event)
        for handler in handlers:
            handler(*args)
