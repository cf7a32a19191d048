"""In-process publish/subscribe channel for domain notifications.

Publishing happens after a unit of work committed. Subscribers are observers:
a handler that raises is logged and skipped, and never affects other handlers
or the committed outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import Final

log = logging.getLogger(__name__)

CONFLICT_RESOLVED: Final[str] = "conflict:resolved"

type EventHandler = Callable[[object], None]


@dataclass(slots=True)
class PublishResult:
    topic: str
    notified: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list[str])


class EventChannel:
    """Registry of handlers per topic with fire-and-forget delivery."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = Lock()

    def subscribe(self, topic: str, handler: EventHandler) -> None:
        if not callable(handler):
            raise TypeError(f"Handler must be callable, got {type(handler)}")
        with self._lock:
            handlers = self._handlers.setdefault(topic, [])
            if any(existing is handler for existing in handlers):
                return
            handlers.append(handler)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.get(topic, [])
            self._handlers[topic] = [existing for existing in handlers if existing is not handler]

    def subscribers(self, topic: str) -> tuple[EventHandler, ...]:
        with self._lock:
            return tuple(self._handlers.get(topic, ()))

    def publish(self, topic: str, payload: object) -> PublishResult:
        """Deliver ``payload`` to every handler of ``topic``. Never raises."""

        result = PublishResult(topic=topic)
        for handler in self.subscribers(topic):
            handler_name = getattr(handler, "__qualname__", repr(handler))
            try:
                handler(payload)
            except Exception:
                result.failed += 1
                result.failures.append(handler_name)
                log.exception("Subscriber %s failed for %s", handler_name, topic)
                continue
            result.notified += 1

        log.debug(
            "Published %s: %s notified, %s failed", topic, result.notified, result.failed
        )
        return result
