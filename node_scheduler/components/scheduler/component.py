"""
Scheduler component - Scheduled publishing and unpublishing of nodes.

Entry points wrap SchedulerManager for callers that hold ports rather than a
configured manager (the command line, tests, other components).

Invariants:
- A committed action clears its scheduled date
- Publishing takes precedence over unpublishing
- Language variants are evaluated independently
- Hook failures are isolated to one variant
"""

from __future__ import annotations

from node_scheduler.domain.policy import SchedulingPolicies
from node_scheduler.rules.models import Rules

from ._impl import SchedulerManager
from .events import EventDispatcher
from .hooks import HookRegistry
from .models import (
    CronInput,
    CronOutput,
    LightweightCronInput,
    ProcessOutput,
    PublishInput,
    ScheduleAction,
    UnpublishInput,
)
from .ports import (
    ActionStorePort,
    CacheTagsPort,
    ClockPort,
    ModerationPort,
    NodeStorePort,
    RulesEventPort,
)


def _create_manager(
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None,
    events: EventDispatcher | None,
    clock: ClockPort | None,
    actions: ActionStorePort | None = None,
    moderation: ModerationPort | None = None,
    rules_events: RulesEventPort | None = None,
    cache: CacheTagsPort | None = None,
) -> SchedulerManager:
    """Create a scheduler manager from ports."""
    return SchedulerManager(
        store=store,
        policies=SchedulingPolicies(rules),
        hooks=hooks,
        events=events,
        clock=clock,
        actions=actions,
        moderation=moderation,
        rules_events=rules_events,
        cache=cache,
    )


# --- Component Entry Points ---


def run_publish(
    inp: PublishInput,
    *,
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None = None,
    events: EventDispatcher | None = None,
    clock: ClockPort | None = None,
) -> ProcessOutput:
    """
    Publish all nodes whose publish_on time has passed.

    Args:
        inp: Input with an optional reference time.
        store: Node store port.
        rules: Loaded scheduler rules.
        hooks: Optional hook registry.
        events: Optional event dispatcher.
        clock: Optional clock, used when inp.now is None.

    Returns:
        ProcessOutput telling whether any node changed.
    """
    manager = _create_manager(store, rules, hooks, events, clock)
    changed = manager.publish(inp.now)
    return ProcessOutput(action=ScheduleAction.PUBLISH, changed=changed)


def run_unpublish(
    inp: UnpublishInput,
    *,
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None = None,
    events: EventDispatcher | None = None,
    clock: ClockPort | None = None,
) -> ProcessOutput:
    """Unpublish all nodes whose unpublish_on time has passed."""
    manager = _create_manager(store, rules, hooks, events, clock)
    changed = manager.unpublish(inp.now)
    return ProcessOutput(action=ScheduleAction.UNPUBLISH, changed=changed)


def run_cron(
    inp: CronInput,
    *,
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None = None,
    events: EventDispatcher | None = None,
    clock: ClockPort | None = None,
    cache: CacheTagsPort | None = None,
) -> CronOutput:
    """Publish then unpublish in one run."""
    manager = _create_manager(store, rules, hooks, events, clock, cache=cache)
    return manager.cron(inp.now)


def run_lightweight_cron(
    inp: LightweightCronInput,
    *,
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None = None,
    events: EventDispatcher | None = None,
    clock: ClockPort | None = None,
    cache: CacheTagsPort | None = None,
) -> None:
    """Out-of-band cron run with start and completion log lines."""
    manager = _create_manager(store, rules, hooks, events, clock, cache=cache)
    manager.run_lightweight_cron(inp.options)


def run(
    inp: PublishInput | UnpublishInput | CronInput | LightweightCronInput,
    *,
    store: NodeStorePort,
    rules: Rules,
    hooks: HookRegistry | None = None,
    events: EventDispatcher | None = None,
    clock: ClockPort | None = None,
    cache: CacheTagsPort | None = None,
) -> ProcessOutput | CronOutput | None:
    """
    Main entry point for the scheduler component.

    Dispatches to appropriate handler based on input type. The cache is
    only used by the cron inputs.
    """
    if isinstance(inp, PublishInput):
        return run_publish(inp, store=store, rules=rules, hooks=hooks, events=events, clock=clock)
    elif isinstance(inp, UnpublishInput):
        return run_unpublish(
            inp, store=store, rules=rules, hooks=hooks, events=events, clock=clock
        )
    elif isinstance(inp, CronInput):
        return run_cron(
            inp, store=store, rules=rules, hooks=hooks, events=events, clock=clock, cache=cache
        )
    elif isinstance(inp, LightweightCronInput):
        return run_lightweight_cron(
            inp, store=store, rules=rules, hooks=hooks, events=events, clock=clock, cache=cache
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
