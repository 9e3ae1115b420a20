"""Content moderation lookup by node type."""

from __future__ import annotations

from collections.abc import Iterable

from node_scheduler.domain.entities import Node
from node_scheduler.rules.models import Rules


class WorkflowModeration:
    """Treats every node of the given types as moderated."""

    def __init__(self, moderated_types: Iterable[str] = ()) -> None:
        self.moderated_types = frozenset(moderated_types)

    @classmethod
    def from_rules(cls, rules: Rules) -> WorkflowModeration:
        """Types flagged ``moderated: true`` in the rules."""
        return cls(type_id for type_id, settings in rules.node_types.items() if settings.moderated)

    def is_moderated(self, node: Node) -> bool:
        return node.type in self.moderated_types
