"""
Node actions used to commit a scheduled transition.

The scheduler resolves an action id per node and executes the configured
action; when none is configured it saves the node directly.

Key behaviors:
- node_publish_action / node_unpublish_action: default ids, not configured
  out of the box
- state_change__node__published / state_change__node__archived: used for
  moderated nodes, configured out of the box
"""

from __future__ import annotations

from node_scheduler.components.scheduler.models import ScheduleAction
from node_scheduler.components.scheduler.ports import NodeAction, NodeStorePort
from node_scheduler.domain.entities import ModerationState, Node
from node_scheduler.domain.state import moderate, transition

DEFAULT_ACTION_IDS: dict[ScheduleAction, str] = {
    ScheduleAction.PUBLISH: "node_publish_action",
    ScheduleAction.UNPUBLISH: "node_unpublish_action",
}

MODERATION_ACTION_IDS: dict[ScheduleAction, str] = {
    ScheduleAction.PUBLISH: "state_change__node__published",
    ScheduleAction.UNPUBLISH: "state_change__node__archived",
}


def resolve_action_id(action: ScheduleAction, moderated: bool) -> str:
    """Id of the action that commits a scheduled transition."""
    if moderated:
        return MODERATION_ACTION_IDS[action]
    return DEFAULT_ACTION_IDS[action]


class SetStatusAction:
    """Sets the published flag for an action, then saves."""

    def __init__(self, store: NodeStorePort, action: ScheduleAction) -> None:
        self.id = DEFAULT_ACTION_IDS[action]
        self._store = store
        self._action = action

    def execute(self, node: Node) -> None:
        self._store.save(transition(node, self._action))


class ModerationStateAction:
    """Moves a moderated node to a workflow state, then saves."""

    def __init__(self, store: NodeStorePort, action_id: str, state: ModerationState) -> None:
        self.id = action_id
        self.state = state
        self._store = store

    def execute(self, node: Node) -> None:
        self._store.save(moderate(node, self.state))


class ActionRegistry:
    """Configured node actions by id."""

    def __init__(self, actions: list[NodeAction] | None = None) -> None:
        self._actions: dict[str, NodeAction] = {}
        for action in actions or []:
            self.add(action)

    def add(self, action: NodeAction) -> None:
        self._actions[action.id] = action

    def remove(self, action_id: str) -> None:
        self._actions.pop(action_id, None)

    def load(self, action_id: str) -> NodeAction | None:
        return self._actions.get(action_id)

    @property
    def ids(self) -> list[str]:
        return list(self._actions)


def create_action_registry(store: NodeStorePort) -> ActionRegistry:
    """Registry with the moderation state-change actions configured."""
    return ActionRegistry(
        [
            ModerationStateAction(
                store, MODERATION_ACTION_IDS[ScheduleAction.PUBLISH], "published"
            ),
            ModerationStateAction(
                store, MODERATION_ACTION_IDS[ScheduleAction.UNPUBLISH], "archived"
            ),
        ]
    )
