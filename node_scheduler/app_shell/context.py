from __future__ import annotations

from dataclasses import dataclass

from node_scheduler.adapters.cache import MemoryCacheTags
from node_scheduler.adapters.clock import SystemClock
from node_scheduler.adapters.moderation import WorkflowModeration
from node_scheduler.adapters.sqlite.migrator import SQLiteMigrator
from node_scheduler.adapters.sqlite.repos import SQLiteNodeStore
from node_scheduler.adapters.time_london import create_date_formatter
from node_scheduler.components.rules_integration import RulesIntegration
from node_scheduler.components.scheduler import (
    ActionRegistry,
    ClockPort,
    EventDispatcher,
    HookRegistry,
    SchedulerManager,
    create_action_registry,
    hook_registry,
)
from node_scheduler.domain.policy import SchedulingPolicies
from node_scheduler.rules.models import Rules


@dataclass
class SchedulerContext:
    store: SQLiteNodeStore
    manager: SchedulerManager
    hooks: HookRegistry
    events: EventDispatcher
    actions: ActionRegistry
    rules_integration: RulesIntegration
    cache: MemoryCacheTags
    rules: Rules

    @classmethod
    def create(
        cls,
        db_path: str,
        rules: Rules,
        clock: ClockPort | None = None,
        hooks: HookRegistry | None = None,
    ) -> SchedulerContext:
        """
        Wire a scheduler against a SQLite database, applying pending
        migrations first. Hooks default to the shared module registry.
        """
        SQLiteMigrator(db_path).run_migrations()

        store = SQLiteNodeStore(db_path)
        hooks = hooks if hooks is not None else hook_registry
        events = EventDispatcher()
        actions = create_action_registry(store)
        rules_integration = RulesIntegration()
        cache = MemoryCacheTags()

        manager = SchedulerManager(
            store=store,
            policies=SchedulingPolicies(rules),
            hooks=hooks,
            events=events,
            clock=clock or SystemClock(),
            date_formatter=create_date_formatter(
                rules.scheduler.display_timezone, rules.scheduler.short_date_format
            ),
            actions=actions,
            moderation=WorkflowModeration.from_rules(rules),
            rules_events=rules_integration,
            cache=cache,
        )

        return cls(
            store=store,
            manager=manager,
            hooks=hooks,
            events=events,
            actions=actions,
            rules_integration=rules_integration,
            cache=cache,
            rules=rules,
        )
