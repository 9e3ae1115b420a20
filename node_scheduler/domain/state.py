from typing import Any

from node_scheduler.domain.entities import ModerationState, Node, ScheduleAction


def target_status(action: ScheduleAction) -> bool:
    """Published flag a node ends up with once the action is applied."""
    return action is ScheduleAction.PUBLISH


def transition(node: Node, action: ScheduleAction) -> Node:
    """
    Return a NEW Node with the published flag set for the action.
    Scheduling fields and revision bookkeeping are left untouched.
    """
    return node.model_copy(update={"status": target_status(action)})


def moderate(node: Node, state: ModerationState) -> Node:
    """
    Return a NEW Node moved to a moderation state.
    Only the 'published' state makes the node visible.
    """
    updates: dict[str, Any] = {
        "moderation_state": state,
        "status": state == "published",
    }
    return node.model_copy(update=updates)


def clear_schedule(node: Node, action: ScheduleAction) -> None:
    """Unset the action's scheduled time so the node is not selected again."""
    setattr(node, action.date_field, None)


def scheduled_time(node: Node, action: ScheduleAction) -> int | None:
    value: int | None = getattr(node, action.date_field)
    return value
