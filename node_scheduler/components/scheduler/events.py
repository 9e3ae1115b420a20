"""Event dispatcher for the before/after transition events."""

from __future__ import annotations

import logging
from collections.abc import Callable

from node_scheduler.components.scheduler.models import SchedulerEvent
from node_scheduler.domain.entities import Node

logger = logging.getLogger(__name__)

# A subscriber may replace the node by assigning event.node or by returning
# a Node. Returning None keeps the current one.
EventSubscriber = Callable[[SchedulerEvent], Node | None]


class EventDispatcher:
    """Dispatches named events to subscribers, highest priority first."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[tuple[int, int, EventSubscriber]]] = {}
        self._sequence = 0

    def subscribe(
        self,
        event_name: str,
        subscriber: EventSubscriber,
        priority: int = 0,
    ) -> EventSubscriber:
        self._sequence += 1
        entries = self._subscribers.setdefault(event_name, [])
        entries.append((priority, self._sequence, subscriber))
        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        return subscriber

    def on(
        self, event_name: str, priority: int = 0
    ) -> Callable[[EventSubscriber], EventSubscriber]:
        """Decorator form of subscribe."""

        def decorator(fn: EventSubscriber) -> EventSubscriber:
            return self.subscribe(event_name, fn, priority)

        return decorator

    def subscribers(self, event_name: str) -> list[EventSubscriber]:
        return [entry[2] for entry in self._subscribers.get(event_name, [])]

    def dispatch(self, event: SchedulerEvent, event_name: str) -> SchedulerEvent:
        """
        Run the subscribers of an event in order.

        Each subscriber sees the node left by the previous one. Returns the
        event, whose ``node`` is the latest replacement.
        """
        event.name = event_name
        for subscriber in self.subscribers(event_name):
            replacement = subscriber(event)
            if replacement is not None:
                event.node = replacement
            if event.stopped:
                logger.debug("Propagation of %s stopped by %r", event_name, subscriber)
                break
        return event
