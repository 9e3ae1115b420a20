"""
SchedulerManager - Scheduled publishing and unpublishing of nodes.

Selects nodes whose publish_on / unpublish_on time has arrived, runs the
guard and override hooks, dispatches the before/after events and commits the
new state.

Key behaviors:
- Candidates are processed in (scheduled time, nid) order
- Every language variant of the latest revision is evaluated on its own
- The scheduled time is cleared once the action is committed, so a second
  run with no intervening edits processes nothing
- Publishing takes precedence: a variant with an overdue publish_on is not
  unpublished
- A hook-reported failure skips that variant only; TypeNotEnabledError and
  MissingScheduleDateError abort the run

Runs are synchronous and take no locks. Callers must not start overlapping
runs against the same store.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from node_scheduler.adapters.clock import SystemClock
from node_scheduler.adapters.time_london import create_date_formatter
from node_scheduler.components.scheduler.actions import resolve_action_id
from node_scheduler.components.scheduler.events import EventDispatcher
from node_scheduler.components.scheduler.hooks import (
    NID_LIST,
    NID_LIST_ALTER,
    HookRegistry,
    guard_hook_name,
    override_hook_name,
)
from node_scheduler.components.scheduler.models import (
    CronOptions,
    CronOutput,
    HookResult,
    MissingScheduleDateError,
    ScheduleAction,
    SchedulerEvent,
    SchedulerEvents,
    TypeNotEnabledError,
    combine_results,
)
from node_scheduler.components.scheduler.ports import (
    ActionStorePort,
    CacheTagsPort,
    ClockPort,
    DateFormatterPort,
    ModerationPort,
    NodeStorePort,
    RulesEventPort,
)
from node_scheduler.components.scheduler.query import NodeQuery
from node_scheduler.domain.entities import Node, NodeRevision
from node_scheduler.domain.policy import SchedulingPolicies, TypeSchedulingPolicy
from node_scheduler.domain.state import clear_schedule, scheduled_time, transition

logger = logging.getLogger(__name__)

CRON_SETTINGS_PATH = "/admin/config/content/scheduler/cron"
NODE_LIST_CACHE_TAG = "node_list"


def node_path(node: Node) -> str:
    return f"/node/{node.nid}"


def node_type_settings_path(type_id: str) -> str:
    return f"/admin/structure/types/manage/{type_id}"


class SchedulerManager:
    """
    Scheduler manager.

    Owns the publish and unpublish pipelines. Collaborators other than the
    store and the policies are optional.
    """

    def __init__(
        self,
        store: NodeStorePort,
        policies: SchedulingPolicies,
        hooks: HookRegistry | None = None,
        events: EventDispatcher | None = None,
        clock: ClockPort | None = None,
        date_formatter: DateFormatterPort | None = None,
        actions: ActionStorePort | None = None,
        moderation: ModerationPort | None = None,
        rules_events: RulesEventPort | None = None,
        cache: CacheTagsPort | None = None,
    ) -> None:
        settings = policies.settings
        self._store = store
        self._policies = policies
        self._hooks = hooks or HookRegistry()
        self._events = events or EventDispatcher()
        self._clock = clock or SystemClock()
        self._dates = date_formatter or create_date_formatter(
            settings.display_timezone, settings.short_date_format
        )
        self._actions = actions
        self._moderation = moderation
        self._rules_events = rules_events
        self._cache = cache

    # --- Pipelines ---

    def publish(self, now: int | None = None) -> bool:
        """
        Publish scheduled nodes.

        Returns True if any node variant has been published.

        Raises:
            TypeNotEnabledError: a candidate's type is not enabled for publishing
            MissingScheduleDateError: a publish_on date vanished mid-run
        """
        return bool(self._process(ScheduleAction.PUBLISH, now))

    def unpublish(self, now: int | None = None) -> bool:
        """
        Unpublish scheduled nodes.

        Returns True if any node variant has been unpublished.

        Raises:
            TypeNotEnabledError: a candidate's type is not enabled for unpublishing
            MissingScheduleDateError: an unpublish_on date vanished mid-run
        """
        return bool(self._process(ScheduleAction.UNPUBLISH, now))

    def _process(
        self,
        action: ScheduleAction,
        now: int | None,
        held: frozenset[tuple[int, str]] = frozenset(),
    ) -> list[tuple[int, str]]:
        """
        Run one pipeline. Returns the (nid, langcode) of each committed variant.

        Variants listed in ``held`` are skipped.
        """
        if now is None:
            now = self._clock.request_time()

        nids = self._select(action, now)

        # Other modules may add candidates, then alter the merged list.
        nids = list(dict.fromkeys([*nids, *self.nid_list(action)]))
        for alter in self._hooks.implementations(NID_LIST_ALTER):
            alter(nids, action)

        committed = []
        for revision in self._load_nodes(nids):
            # The type is shared by all translations, so check it once.
            policy = self._policies.for_type(revision.type)
            if not policy.is_enabled(action):
                raise TypeNotEnabledError(revision.nid, revision.title, policy.label, action)

            for langcode in revision.translation_languages():
                if (revision.nid, langcode) in held:
                    continue
                node = revision.get_translation(langcode)
                if self._process_variant(node, action, policy, now):
                    committed.append((node.nid, node.langcode))

        return committed

    def _select(self, action: ScheduleAction, now: int) -> list[int]:
        """Ids of nodes of enabled types whose scheduled time has passed."""
        enabled_types = self._policies.enabled_types(action)
        if not enabled_types:
            return []

        field = action.date_field
        query = (
            NodeQuery()
            .exists(field)
            .condition(field, now, "<=")
            .condition("type", enabled_types, "IN")
            .latest_revision()
            .sort(field)
            .sort("nid")
        )
        return self._store.execute(query)

    def _load_nodes(self, nids: list[int]) -> list[NodeRevision]:
        """Load the latest revision of each node."""
        revisions = []
        for nid in nids:
            revision_ids = self._store.revision_ids(nid)
            revision = self._store.load_revision(revision_ids[-1]) if revision_ids else None
            if revision is None:
                logger.warning("Scheduled node %d could not be loaded.", nid)
                continue
            revisions.append(revision)
        return revisions

    def _process_variant(
        self,
        node: Node,
        action: ScheduleAction,
        policy: TypeSchedulingPolicy,
        now: int,
    ) -> bool:
        """Run the eligibility pipeline for one variant. Returns True if committed."""
        scheduled = scheduled_time(node, action)
        if not scheduled or scheduled > now:
            return False

        # An overdue publish_on means publishing is being held back by a hook;
        # unpublishing must wait for it.
        if action is ScheduleAction.UNPUBLISH:
            if node.publish_on and node.publish_on <= now:
                return False

        if not self.is_allowed(node, action):
            return False

        # Guard hooks receive the node and may have removed the date.
        if not scheduled_time(node, action):
            raise MissingScheduleDateError(node.nid, node.title, action.date_field, action)

        node = self._dispatch(node, SchedulerEvents.pre(action))
        original_dates = {"created": node.created, "changed": node.changed}

        node.changed = scheduled
        msg_extra = ""
        if action is ScheduleAction.PUBLISH and (
            policy.publish_touch
            or (node.created > scheduled and policy.publish_past_date_created)
        ):
            msg_extra = (
                f"The previous creation date was {self._dates.format(node.created, 'short')}, "
                "now updated to match the publishing date."
            )
            node.created = scheduled

        if policy.creates_revision(action):
            node.new_revision = True
            node.revision_timestamp = now
            node.revision_log = (
                f"{action.past_tense.capitalize()} by Scheduler. The scheduled "
                f"{action.value}ing date was {self._dates.format(scheduled, 'short')}. "
                f"{msg_extra}"
            ).rstrip()

        # Unset the date so the node is not selected again on the next run.
        clear_schedule(node, action)

        hook = override_hook_name(action)
        outcome = self._invoke_override_hooks(node, action)
        links = f"{node_type_settings_path(node.type)} {node_path(node)}"

        if outcome is HookResult.FAILED:
            logger.warning(
                "%sing failed for %s. Calls to %s returned a failure code. %s",
                action.value.capitalize(),
                node.title,
                hook,
                links,
            )
            self._persist_cleared_schedule(node, original_dates)
            return False
        elif outcome is HookResult.HANDLED:
            logger.info(
                "%s: scheduled processing of %s completed by calls to %s. %s",
                policy.label,
                node.title,
                hook,
                links,
            )
        else:
            logger.info(
                "%s: scheduled %sing of %s. %s",
                policy.label,
                action.value,
                node.title,
                links,
            )
            node = transition(node, action)

        if self._rules_events is not None:
            self._rules_events.dispatch_cron_event(node, action)

        node = self._dispatch(node, SchedulerEvents.post(action))
        self._commit(node, action)
        return True

    def _dispatch(self, node: Node, event_name: str) -> Node:
        event = self._events.dispatch(SchedulerEvent(node), event_name)
        return event.node

    def _invoke_override_hooks(self, node: Node, action: ScheduleAction) -> HookResult:
        results = [
            HookResult.from_legacy(hook(node))
            for hook in self._hooks.implementations(override_hook_name(action))
        ]
        return combine_results(results)

    def _persist_cleared_schedule(self, node: Node, original_dates: dict[str, int]) -> None:
        """
        Save a failed variant with only its date cleared. The node is not
        retried on later runs.

        Creation and changed dates are restored; the save goes into the
        node's latest revision, not a new one.
        """
        self._store.save(
            node.model_copy(
                update={
                    **original_dates,
                    "new_revision": False,
                    "revision_log": None,
                    "revision_timestamp": None,
                }
            )
        )

    def _commit(self, node: Node, action: ScheduleAction) -> None:
        moderated = self._moderation is not None and self._moderation.is_moderated(node)
        action_id = resolve_action_id(action, moderated)
        loaded = self._actions.load(action_id) if self._actions is not None else None
        if loaded is not None:
            loaded.execute(node)
        else:
            self._store.save(node)

    # --- Hooks ---

    def is_allowed(self, node: Node, action: ScheduleAction) -> bool:
        """
        Whether other modules allow the scheduled action on a node.

        Every guard hook is called; the action is allowed only if all of them
        return True. Allowed when no guard is registered.
        """
        result = True
        for guard in self._hooks.implementations(guard_hook_name(action)):
            result = bool(guard(node)) and result
        return result

    def nid_list(self, action: ScheduleAction) -> list[int]:
        """Node ids contributed by candidate hooks for an action."""
        nids: list[int] = []
        for hook in self._hooks.implementations(NID_LIST):
            nids.extend(hook(action))
        return nids

    # --- Cron ---

    def cron(self, now: int | None = None) -> CronOutput:
        """
        Publish, then unpublish, then invalidate node listings if anything changed.

        A variant published by this run is left for the next run to unpublish.
        """
        if now is None:
            now = self._clock.request_time()

        published = self._process(ScheduleAction.PUBLISH, now)
        unpublished = self._process(ScheduleAction.UNPUBLISH, now, held=frozenset(published))
        output = CronOutput(published=bool(published), unpublished=bool(unpublished))

        if output.changed and self._cache is not None:
            self._cache.invalidate_tags([NODE_LIST_CACHE_TAG])

        return output

    def run_lightweight_cron(
        self, options: CronOptions | Mapping[str, Any] | None = None
    ) -> None:
        """
        Run only the scheduler part of cron.

        Called from an external crontab via the cron URL, from the admin form,
        or from the command line. Command-line runs may pass nolog.
        """
        if not isinstance(options, CronOptions):
            options = CronOptions.from_mapping(options)

        log = self._policies.settings.log and not options.nolog
        if log:
            logger.info("Lightweight cron run activated by %s.", options.trigger_label)

        self.cron()

        if log:
            logger.info("Lightweight cron run completed. %s", CRON_SETTINGS_PATH)
