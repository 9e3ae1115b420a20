"""
Scheduler component models: hook results, events, errors, inputs and outputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Literal

from node_scheduler.domain.entities import Node, ScheduleAction

__all__ = [
    "ScheduleAction",
    "HookResult",
    "combine_results",
    "SchedulerEvents",
    "SchedulerEvent",
    "SchedulerError",
    "TypeNotEnabledError",
    "MissingScheduleDateError",
    "CronTrigger",
    "CronOptions",
    "PublishInput",
    "UnpublishInput",
    "CronInput",
    "LightweightCronInput",
    "ProcessOutput",
    "CronOutput",
]


# --- Hook Results ---


class HookResult(IntEnum):
    """Outcome of an override hook."""

    FAILED = -1
    NOT_HANDLED = 0
    HANDLED = 1

    @classmethod
    def from_legacy(cls, value: Any) -> HookResult:
        """
        Decode a legacy integer return code.

        Only the exact integers 1 and -1 count; anything else, booleans
        included, means the hook did not handle the node.
        """
        if isinstance(value, HookResult):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            return cls.NOT_HANDLED
        if value == 1:
            return cls.HANDLED
        if value == -1:
            return cls.FAILED
        return cls.NOT_HANDLED


def combine_results(results: Iterable[HookResult]) -> HookResult:
    """FAILED wins over HANDLED, which wins over NOT_HANDLED."""
    handled = False
    failed = False
    for result in results:
        handled = handled or result is HookResult.HANDLED
        failed = failed or result is HookResult.FAILED
    if failed:
        return HookResult.FAILED
    if handled:
        return HookResult.HANDLED
    return HookResult.NOT_HANDLED


# --- Events ---


class SchedulerEvents:
    """Names of the events dispatched around each transition."""

    PRE_PUBLISH = "scheduler.pre_publish"
    PUBLISH = "scheduler.publish"
    PRE_UNPUBLISH = "scheduler.pre_unpublish"
    UNPUBLISH = "scheduler.unpublish"

    @classmethod
    def pre(cls, action: ScheduleAction) -> str:
        return cls.PRE_PUBLISH if action is ScheduleAction.PUBLISH else cls.PRE_UNPUBLISH

    @classmethod
    def post(cls, action: ScheduleAction) -> str:
        return cls.PUBLISH if action is ScheduleAction.PUBLISH else cls.UNPUBLISH


@dataclass
class SchedulerEvent:
    """Envelope around the node being processed. Subscribers may replace it."""

    node: Node
    name: str = ""
    stopped: bool = False

    def stop_propagation(self) -> None:
        self.stopped = True


# --- Errors ---


class SchedulerError(Exception):
    """Base exception for scheduler errors that abort a run."""

    pass


class TypeNotEnabledError(SchedulerError):
    """A candidate's node type is not enabled for the scheduled action."""

    def __init__(self, nid: int, title: str, type_label: str, action: ScheduleAction) -> None:
        self.nid = nid
        self.title = title
        self.type_label = type_label
        self.action = action
        super().__init__(
            f"Node {nid} '{title}' will not be {action.past_tense} because node type "
            f"'{type_label}' is not enabled for scheduled {action.value}ing"
        )


class MissingScheduleDateError(SchedulerError):
    """The scheduled date disappeared between selection and use."""

    def __init__(self, nid: int, title: str, field: str, action: ScheduleAction) -> None:
        self.nid = nid
        self.title = title
        self.field = field
        self.action = action
        super().__init__(
            f"Node {nid} '{title}' will not be {action.past_tense} because field "
            f"'{field}' has no value"
        )


# --- Lightweight Cron Options ---


CronTrigger = Literal["drush", "admin_form", "url"]

TRIGGER_LABELS: dict[str, str] = {
    "drush": "drush command",
    "admin_form": "admin user form",
    "url": "url",
}


@dataclass(frozen=True)
class CronOptions:
    """Options for a lightweight cron run."""

    nolog: bool = False
    trigger: CronTrigger = "url"

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> CronOptions:
        """
        Build options from a legacy options map.

        The presence of a 'nolog' key marks a command-line run, even when
        its value is false; an 'admin_form' key marks the admin form.
        """
        options = options or {}
        trigger: CronTrigger
        if "trigger" in options:
            trigger = options["trigger"]
        elif "nolog" in options:
            trigger = "drush"
        elif "admin_form" in options:
            trigger = "admin_form"
        else:
            trigger = "url"
        if trigger not in TRIGGER_LABELS:
            raise ValueError(f"Unknown cron trigger: {trigger}")
        return cls(nolog=bool(options.get("nolog")), trigger=trigger)

    @property
    def trigger_label(self) -> str:
        return TRIGGER_LABELS[self.trigger]


# --- Input Models ---


@dataclass(frozen=True)
class PublishInput:
    """Input for publishing due nodes."""

    now: int | None = None


@dataclass(frozen=True)
class UnpublishInput:
    """Input for unpublishing due nodes."""

    now: int | None = None


@dataclass(frozen=True)
class CronInput:
    """Input for the combined publish-then-unpublish run."""

    now: int | None = None


@dataclass(frozen=True)
class LightweightCronInput:
    """Input for an out-of-band cron run."""

    options: CronOptions = CronOptions()


# --- Output Models ---


@dataclass(frozen=True)
class ProcessOutput:
    """Output for a single publish or unpublish pass."""

    action: ScheduleAction
    changed: bool


@dataclass(frozen=True)
class CronOutput:
    """Output for a cron run."""

    published: bool
    unpublished: bool

    @property
    def changed(self) -> bool:
        return self.published or self.unpublished
