"""
Rules integration component - Events and actions for reaction rules.
"""

from ._impl import PublishNowAction, RulesIntegration, UnpublishNowAction
from .models import (
    PUBLISH_NOW_ACTION_ID,
    RULES_EVENTS,
    UNPUBLISH_NOW_ACTION_ID,
    Reaction,
    RulesEventRecord,
)

__all__ = [
    # Dispatcher
    "RulesIntegration",
    # Actions
    "PublishNowAction",
    "UnpublishNowAction",
    "PUBLISH_NOW_ACTION_ID",
    "UNPUBLISH_NOW_ACTION_ID",
    # Events
    "RULES_EVENTS",
    "Reaction",
    "RulesEventRecord",
]
