"""Hook registry: named extension points other modules plug into the scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from node_scheduler.components.scheduler.models import HookResult, ScheduleAction
from node_scheduler.domain.entities import Node

logger = logging.getLogger(__name__)

# Adds node ids to the candidates of an action.
CandidateHook = Callable[[ScheduleAction], Iterable[int]]
# Alters the candidate list in place (add, remove, reorder).
AlterHook = Callable[[list[int], ScheduleAction], None]
# Returns False to veto the scheduled action for this run.
GuardHook = Callable[[Node], bool]
# Performs the action instead of the scheduler. Legacy ints 0/1/-1 accepted.
OverrideHook = Callable[[Node], HookResult | int | None]

F = TypeVar("F", bound=Callable[..., Any])

NID_LIST = "nid_list"
NID_LIST_ALTER = "nid_list_alter"

HOOK_NAMES: tuple[str, ...] = (
    NID_LIST,
    NID_LIST_ALTER,
    "allow_publishing",
    "allow_unpublishing",
    "publish_action",
    "unpublish_action",
)


def guard_hook_name(action: ScheduleAction) -> str:
    return f"allow_{action.value}ing"


def override_hook_name(action: ScheduleAction) -> str:
    return f"{action.value}_action"


class HookRegistry:
    """Registry for scheduler hook implementations.

    Implementations run in registration order.

    Usage::

        hooks = HookRegistry()

        @hooks.guard(ScheduleAction.PUBLISH)
        def embargo(node: Node) -> bool:
            return node.type != "press_release"
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[Callable[..., Any]]] = {name: [] for name in HOOK_NAMES}

    def register(self, hook_name: str, fn: F) -> F:
        """Register an implementation of a named hook."""
        if hook_name not in self._hooks:
            raise ValueError(f"Unknown scheduler hook: {hook_name}")
        self._hooks[hook_name].append(fn)
        logger.debug("Registered %s implementation: %s", hook_name, _describe(fn))
        return fn

    def unregister(self, hook_name: str, fn: Callable[..., Any]) -> None:
        if fn in self._hooks.get(hook_name, []):
            self._hooks[hook_name].remove(fn)

    def implementations(self, hook_name: str) -> list[Callable[..., Any]]:
        """Registered implementations of a hook, in registration order."""
        if hook_name not in self._hooks:
            raise ValueError(f"Unknown scheduler hook: {hook_name}")
        return list(self._hooks[hook_name])

    # --- Decorators ---

    def candidates(self) -> Callable[[CandidateHook], CandidateHook]:
        def decorator(fn: CandidateHook) -> CandidateHook:
            return self.register(NID_LIST, fn)

        return decorator

    def alter(self) -> Callable[[AlterHook], AlterHook]:
        def decorator(fn: AlterHook) -> AlterHook:
            return self.register(NID_LIST_ALTER, fn)

        return decorator

    def guard(self, action: ScheduleAction) -> Callable[[GuardHook], GuardHook]:
        def decorator(fn: GuardHook) -> GuardHook:
            return self.register(guard_hook_name(action), fn)

        return decorator

    def override(self, action: ScheduleAction) -> Callable[[OverrideHook], OverrideHook]:
        def decorator(fn: OverrideHook) -> OverrideHook:
            return self.register(override_hook_name(action), fn)

        return decorator

    def clear(self) -> None:
        for implementations in self._hooks.values():
            implementations.clear()


def _describe(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", repr(fn))


hook_registry = HookRegistry()
