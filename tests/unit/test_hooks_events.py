"""
Tests for the hook registry and the event dispatcher.
"""

from __future__ import annotations

import pytest

from node_scheduler.components.scheduler import (
    EventDispatcher,
    HookRegistry,
    ScheduleAction,
    SchedulerEvent,
    hook_registry,
)
from tests.factories import make_node


class TestHookRegistry:
    def test_decorators_register_by_action(self) -> None:
        hooks = HookRegistry()

        @hooks.guard(ScheduleAction.UNPUBLISH)
        def guard(node):
            return True

        @hooks.override(ScheduleAction.PUBLISH)
        def override(node):
            return 0

        @hooks.candidates()
        def candidates(action):
            return []

        @hooks.alter()
        def alter(nids, action):
            pass

        assert hooks.implementations("allow_unpublishing") == [guard]
        assert hooks.implementations("allow_publishing") == []
        assert hooks.implementations("publish_action") == [override]
        assert hooks.implementations("nid_list") == [candidates]
        assert hooks.implementations("nid_list_alter") == [alter]

    def test_registration_order_kept(self) -> None:
        hooks = HookRegistry()
        first = hooks.register("nid_list", lambda action: [1])
        second = hooks.register("nid_list", lambda action: [2])

        assert hooks.implementations("nid_list") == [first, second]

    def test_unknown_hook_rejected(self) -> None:
        hooks = HookRegistry()
        with pytest.raises(ValueError, match="Unknown scheduler hook"):
            hooks.register("allow_archiving", lambda node: True)
        with pytest.raises(ValueError):
            hooks.implementations("allow_archiving")

    def test_unregister_and_clear(self) -> None:
        hooks = HookRegistry()
        fn = hooks.register("allow_publishing", lambda node: True)
        hooks.register("publish_action", lambda node: 1)

        hooks.unregister("allow_publishing", fn)
        assert hooks.implementations("allow_publishing") == []

        hooks.clear()
        assert hooks.implementations("publish_action") == []

    def test_module_registry_is_shared(self) -> None:
        from node_scheduler.components.scheduler.hooks import hook_registry as direct

        assert hook_registry is direct


class TestEventDispatcher:
    def test_subscribers_run_by_priority(self) -> None:
        dispatcher = EventDispatcher()
        calls: list[str] = []
        dispatcher.subscribe("scheduler.publish", lambda e: calls.append("low"), priority=-5)
        dispatcher.subscribe("scheduler.publish", lambda e: calls.append("high"), priority=10)
        dispatcher.subscribe("scheduler.publish", lambda e: calls.append("default"))

        dispatcher.dispatch(SchedulerEvent(make_node(1)), "scheduler.publish")

        assert calls == ["high", "default", "low"]

    def test_replacement_is_threaded(self) -> None:
        dispatcher = EventDispatcher()
        seen: list[str] = []

        @dispatcher.on("scheduler.pre_publish", priority=1)
        def rename(event):
            return event.node.model_copy(update={"title": "First"})

        @dispatcher.on("scheduler.pre_publish")
        def record(event):
            seen.append(event.node.title)

        event = dispatcher.dispatch(SchedulerEvent(make_node(1)), "scheduler.pre_publish")

        assert seen == ["First"]
        assert event.node.title == "First"
        assert event.name == "scheduler.pre_publish"

    def test_stop_propagation(self) -> None:
        dispatcher = EventDispatcher()
        calls: list[str] = []

        def stopper(event):
            calls.append("stopper")
            event.stop_propagation()

        dispatcher.subscribe("scheduler.unpublish", stopper, priority=1)
        dispatcher.subscribe("scheduler.unpublish", lambda e: calls.append("late"))

        event = dispatcher.dispatch(SchedulerEvent(make_node(1)), "scheduler.unpublish")

        assert calls == ["stopper"]
        assert event.stopped is True

    def test_no_subscribers_returns_event(self) -> None:
        node = make_node(1)
        event = EventDispatcher().dispatch(SchedulerEvent(node), "scheduler.publish")
        assert event.node is node
