from pydantic import BaseModel, ConfigDict

from node_scheduler.domain.entities import ScheduleAction
from node_scheduler.rules.models import NodeTypeSettings, Rules, SchedulerSettings


class TypeSchedulingPolicy(BaseModel):
    """Fully resolved scheduling settings of one node type."""

    model_config = ConfigDict(frozen=True)

    type_id: str
    label: str
    publish_enable: bool
    publish_touch: bool
    publish_past_date_created: bool
    publish_revision: bool
    unpublish_enable: bool
    unpublish_revision: bool
    revision_log_required: bool

    def is_enabled(self, action: ScheduleAction) -> bool:
        if action is ScheduleAction.PUBLISH:
            return self.publish_enable
        return self.unpublish_enable

    def creates_revision(self, action: ScheduleAction) -> bool:
        if action is ScheduleAction.PUBLISH:
            return self.publish_revision
        return self.unpublish_revision


def resolve_policy(
    type_id: str,
    settings: NodeTypeSettings | None,
    defaults: SchedulerSettings,
) -> TypeSchedulingPolicy:
    """Merge per-type settings over the global defaults."""
    settings = settings or NodeTypeSettings()

    def pick(value: bool | None, default: bool) -> bool:
        return default if value is None else value

    return TypeSchedulingPolicy(
        type_id=type_id,
        label=settings.label or type_id.replace("_", " ").capitalize(),
        publish_enable=pick(settings.publish_enable, defaults.default_publish_enable),
        publish_touch=pick(settings.publish_touch, defaults.default_publish_touch),
        publish_past_date_created=pick(
            settings.publish_past_date_created, defaults.default_publish_past_date_created
        ),
        publish_revision=pick(settings.publish_revision, defaults.default_publish_revision),
        unpublish_enable=pick(settings.unpublish_enable, defaults.default_unpublish_enable),
        unpublish_revision=pick(
            settings.unpublish_revision, defaults.default_unpublish_revision
        ),
        revision_log_required=pick(
            settings.revision_log_required, defaults.default_revision_log_required
        ),
    )


class SchedulingPolicies:
    """Per-type policies, resolved once when the rules are loaded."""

    def __init__(self, rules: Rules):
        self.settings = rules.scheduler
        self._policies = {
            type_id: resolve_policy(type_id, type_settings, rules.scheduler)
            for type_id, type_settings in rules.node_types.items()
        }
        self._fallbacks: dict[str, TypeSchedulingPolicy] = {}

    def for_type(self, type_id: str) -> TypeSchedulingPolicy:
        """
        Policy of a node type. Types missing from the rules get the global
        defaults, the same as a configured type with no overrides.
        """
        policy = self._policies.get(type_id) or self._fallbacks.get(type_id)
        if policy is None:
            policy = resolve_policy(type_id, None, self.settings)
            self._fallbacks[type_id] = policy
        return policy

    def enabled_types(self, action: ScheduleAction) -> list[str]:
        """Configured types enabled for the action, in configuration order."""
        return [
            type_id for type_id, policy in self._policies.items() if policy.is_enabled(action)
        ]

    @property
    def type_ids(self) -> list[str]:
        return list(self._policies)
