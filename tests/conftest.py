"""Shared fixtures for scheduler tests."""

from __future__ import annotations

import pytest

from node_scheduler.adapters.clock import FrozenClock
from node_scheduler.adapters.memory_store import InMemoryNodeStore
from node_scheduler.components.scheduler import (
    EventDispatcher,
    HookRegistry,
    SchedulerManager,
)
from node_scheduler.domain.policy import SchedulingPolicies
from node_scheduler.rules.loader import parse_rules
from node_scheduler.rules.models import Rules
from tests.factories import NOW, RULES_YAML


@pytest.fixture
def rules() -> Rules:
    return parse_rules(RULES_YAML)


@pytest.fixture
def policies(rules: Rules) -> SchedulingPolicies:
    return SchedulingPolicies(rules)


@pytest.fixture
def store() -> InMemoryNodeStore:
    return InMemoryNodeStore()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def events() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def manager(
    store: InMemoryNodeStore,
    policies: SchedulingPolicies,
    hooks: HookRegistry,
    events: EventDispatcher,
    clock: FrozenClock,
) -> SchedulerManager:
    return SchedulerManager(
        store=store,
        policies=policies,
        hooks=hooks,
        events=events,
        clock=clock,
    )
