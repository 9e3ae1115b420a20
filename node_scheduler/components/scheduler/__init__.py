"""
Scheduler component - Scheduled publishing and unpublishing of nodes.
"""

from ._impl import SchedulerManager
from .actions import (
    ActionRegistry,
    ModerationStateAction,
    SetStatusAction,
    create_action_registry,
    resolve_action_id,
)
from .component import (
    run,
    run_cron,
    run_lightweight_cron,
    run_publish,
    run_unpublish,
)
from .events import EventDispatcher
from .hooks import HookRegistry, hook_registry
from .models import (
    CronInput,
    CronOptions,
    CronOutput,
    HookResult,
    LightweightCronInput,
    MissingScheduleDateError,
    ProcessOutput,
    PublishInput,
    ScheduleAction,
    SchedulerError,
    SchedulerEvent,
    SchedulerEvents,
    TypeNotEnabledError,
    UnpublishInput,
    combine_results,
)
from .ports import (
    ActionStorePort,
    CacheTagsPort,
    ClockPort,
    DateFormatterPort,
    ModerationPort,
    NodeStorePort,
    RulesEventPort,
)
from .query import NodeQuery

__all__ = [
    # Entry points
    "run",
    "run_cron",
    "run_lightweight_cron",
    "run_publish",
    "run_unpublish",
    # Manager
    "SchedulerManager",
    # Extension points
    "EventDispatcher",
    "HookRegistry",
    "hook_registry",
    "ActionRegistry",
    "ModerationStateAction",
    "SetStatusAction",
    "create_action_registry",
    "resolve_action_id",
    "NodeQuery",
    # Input models
    "CronInput",
    "CronOptions",
    "LightweightCronInput",
    "PublishInput",
    "UnpublishInput",
    # Output models
    "CronOutput",
    "ProcessOutput",
    # Types
    "HookResult",
    "ScheduleAction",
    "SchedulerEvent",
    "SchedulerEvents",
    "combine_results",
    # Errors
    "MissingScheduleDateError",
    "SchedulerError",
    "TypeNotEnabledError",
    # Ports
    "ActionStorePort",
    "CacheTagsPort",
    "ClockPort",
    "DateFormatterPort",
    "ModerationPort",
    "NodeStorePort",
    "RulesEventPort",
]
