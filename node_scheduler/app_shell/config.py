import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from node_scheduler.domain.entities import ScheduleAction
from node_scheduler.domain.policy import SchedulingPolicies
from node_scheduler.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_rules(rules: Rules) -> list[str]:
    """
    Check the scheduler rules before a run.

    Returns the warnings, which are also logged. Raises ValueError if the
    display timezone does not exist.
    """
    try:
        ZoneInfo(rules.scheduler.display_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(
            f"Unknown display timezone: {rules.scheduler.display_timezone}"
        ) from e

    policies = SchedulingPolicies(rules)
    warnings = []
    for action in ScheduleAction:
        if not policies.enabled_types(action):
            warnings.append(f"No node type is enabled for scheduled {action.value}ing.")

    # The generated log message is only written when a revision is created.
    for type_id in policies.type_ids:
        policy = policies.for_type(type_id)
        if not policy.revision_log_required:
            continue
        for action in ScheduleAction:
            if policy.is_enabled(action) and not policy.creates_revision(action):
                warnings.append(
                    f"Node type '{policy.label}' requires revision log messages but "
                    f"scheduled {action.value}ing does not create a revision."
                )

    for warning in warnings:
        logger.warning(warning)
    return warnings
