"""
Rules integration models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from node_scheduler.domain.entities import Node, ScheduleAction

# --- Event and action ids ---

RULES_EVENTS: dict[ScheduleAction, str] = {
    ScheduleAction.PUBLISH: "scheduler_has_published_this_node_event",
    ScheduleAction.UNPUBLISH: "scheduler_has_unpublished_this_node_event",
}

PUBLISH_NOW_ACTION_ID = "scheduler_publish_now_action"
UNPUBLISH_NOW_ACTION_ID = "scheduler_unpublish_now_action"

# A reaction receives the node the scheduler is about to save and may change it.
Reaction = Callable[[Node], None]


# --- Records ---


@dataclass(frozen=True)
class RulesEventRecord:
    """One dispatched rules event."""

    event_name: str
    nid: int
    langcode: str
