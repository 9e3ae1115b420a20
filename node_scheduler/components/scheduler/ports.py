"""
Scheduler component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from node_scheduler.components.scheduler.models import ScheduleAction
from node_scheduler.components.scheduler.query import NodeQuery
from node_scheduler.domain.entities import Node, NodeRevision


class NodeStorePort(Protocol):
    """Node storage with revisions and language variants."""

    def execute(self, query: NodeQuery) -> list[int]:
        """Run a query. Returns distinct node ids in sort order."""
        ...

    def load(self, nid: int) -> NodeRevision | None:
        """Load the default revision of a node."""
        ...

    def revision_ids(self, nid: int) -> list[int]:
        """Revision ids of a node, oldest first."""
        ...

    def load_revision(self, vid: int) -> NodeRevision | None:
        """Load a specific revision."""
        ...

    def save(self, node: Node) -> Node:
        """
        Save one language variant.

        When ``node.new_revision`` is set a new revision is created holding
        this variant and copies of its siblings. Otherwise the variant is
        written into the node's latest revision.
        """
        ...


class ClockPort(Protocol):
    def request_time(self) -> int:
        """Epoch seconds at the start of the current request."""
        ...


class DateFormatterPort(Protocol):
    def format(self, timestamp: int, type_: str = "short") -> str:
        """Format an epoch timestamp with a named format."""
        ...


class NodeAction(Protocol):
    """A configured action that changes and saves a node."""

    id: str

    def execute(self, node: Node) -> None:
        ...


class ActionStorePort(Protocol):
    def load(self, action_id: str) -> NodeAction | None:
        """Load a configured action, or None if it does not exist."""
        ...


class ModerationPort(Protocol):
    def is_moderated(self, node: Node) -> bool:
        """Whether the node's type takes part in a moderation workflow."""
        ...


class RulesEventPort(Protocol):
    def dispatch_cron_event(self, node: Node, action: ScheduleAction) -> None:
        """Tell the rules engine that a scheduled action was committed."""
        ...


class CacheTagsPort(Protocol):
    def invalidate_tags(self, tags: Iterable[str]) -> None:
        ...
