"""
Rules integration - Reaction rules fired by scheduled transitions.

Key behaviors:
- After each committed transition the scheduler calls dispatch_cron_event,
  which fires the matching "has published" / "has unpublished" event
- Reactions run in registration order and receive the node before it is
  saved, so changes they make are saved with it
- The publish-now and unpublish-now actions only change the status; saving
  is left to whoever holds the node
"""

from __future__ import annotations

import logging
from collections import defaultdict

from node_scheduler.domain.entities import Node, ScheduleAction

from .models import (
    PUBLISH_NOW_ACTION_ID,
    RULES_EVENTS,
    UNPUBLISH_NOW_ACTION_ID,
    Reaction,
    RulesEventRecord,
)

logger = logging.getLogger(__name__)


class RulesIntegration:
    """Fans scheduler cron events out to registered reactions."""

    def __init__(self) -> None:
        self._reactions: dict[str, list[Reaction]] = defaultdict(list)
        self.history: list[RulesEventRecord] = []

    def react(self, event_name: str, reaction: Reaction) -> None:
        if event_name not in RULES_EVENTS.values():
            raise ValueError(f"Unknown rules event: {event_name}")
        self._reactions[event_name].append(reaction)

    def on(self, action: ScheduleAction):
        """Decorator registering a reaction to a scheduled action."""

        def decorator(func: Reaction) -> Reaction:
            self.react(RULES_EVENTS[action], func)
            return func

        return decorator

    def reactions(self, event_name: str) -> list[Reaction]:
        return list(self._reactions.get(event_name, []))

    def dispatch_cron_event(self, node: Node, action: ScheduleAction) -> None:
        event_name = RULES_EVENTS[action]
        self.history.append(RulesEventRecord(event_name, node.nid, node.langcode))
        logger.debug("Rules event %s for node %d (%s)", event_name, node.nid, node.langcode)
        for reaction in self._reactions.get(event_name, []):
            reaction(node)


class PublishNowAction:
    """Publish the content immediately."""

    id = PUBLISH_NOW_ACTION_ID

    def execute(self, node: Node) -> None:
        node.status = True


class UnpublishNowAction:
    """Unpublish the content immediately."""

    id = UNPUBLISH_NOW_ACTION_ID

    def execute(self, node: Node) -> None:
        node.status = False
