"""
Tests for NodeQuery and the in-memory node store.
"""

from __future__ import annotations

import pytest

from node_scheduler.adapters.memory_store import InMemoryNodeStore
from node_scheduler.components.scheduler import NodeQuery, ScheduleAction
from node_scheduler.components.scheduler.actions import (
    ActionRegistry,
    SetStatusAction,
    create_action_registry,
    resolve_action_id,
)
from node_scheduler.components.scheduler.query import Condition
from tests.factories import make_node


class TestNodeQuery:
    def test_builder_collects_conditions_and_sorts(self) -> None:
        query = (
            NodeQuery()
            .exists("publish_on")
            .condition("publish_on", 100, "<=")
            .condition("type", ["article"], "IN")
            .latest_revision()
            .sort("publish_on")
            .sort("nid", "desc")
        )

        assert [c.operator for c in query.conditions] == ["EXISTS", "<=", "IN"]
        assert query.sorts == [("publish_on", "ASC"), ("nid", "DESC")]
        assert query.latest_revision_only is True

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown node field"):
            NodeQuery().condition("body", "x")

    def test_in_requires_sequence(self) -> None:
        with pytest.raises(ValueError, match="IN conditions"):
            NodeQuery().condition("type", "article", "IN")

    def test_bad_operator_and_direction(self) -> None:
        with pytest.raises(ValueError):
            NodeQuery().condition("nid", 1, "!=")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            NodeQuery().sort("nid", "sideways")

    @pytest.mark.parametrize(
        ("condition", "actual", "expected"),
        [
            (Condition("publish_on", None, "EXISTS"), 5, True),
            (Condition("publish_on", None, "EXISTS"), None, False),
            (Condition("publish_on", 10, "<="), 10, True),
            (Condition("publish_on", 10, "<"), 10, False),
            (Condition("publish_on", 10, ">"), None, False),
            (Condition("type", ["page", "article"], "IN"), "article", True),
            (Condition("status", True), False, False),
        ],
    )
    def test_condition_matches(self, condition: Condition, actual, expected: bool) -> None:
        assert condition.matches(actual) is expected


class TestInMemoryNodeStore:
    def test_execute_filters_latest_revision(self) -> None:
        store = InMemoryNodeStore()
        store.add(make_node(1, publish_on=10))
        store.add(make_node(1, publish_on=None))
        store.add(make_node(2, publish_on=20))

        latest = NodeQuery().exists("publish_on").latest_revision()
        any_revision = NodeQuery().exists("publish_on")

        assert store.execute(latest) == [2]
        assert sorted(store.execute(any_revision)) == [1, 2]

    def test_execute_matches_any_variant_once(self) -> None:
        store = InMemoryNodeStore()
        store.add(
            make_node(1, langcode="en", publish_on=30),
            make_node(1, langcode="fr", publish_on=10),
        )
        store.add(make_node(2, publish_on=20))

        query = NodeQuery().exists("publish_on").sort("publish_on").sort("nid")

        assert store.execute(query) == [1, 2]

    def test_loads_are_copies(self) -> None:
        store = InMemoryNodeStore()
        store.add(make_node(1, title="Original"))

        revision = store.load(1)
        assert revision is not None
        revision.translations["en"].title = "Changed"

        assert store.get(1).title == "Original"

    def test_save_in_place(self) -> None:
        store = InMemoryNodeStore()
        store.add(make_node(1))
        node = store.get(1)
        node.status = True

        saved = store.save(node)

        assert store.revision_ids(1) == [saved.vid]
        assert store.get(1).status is True
        assert store.save_count == 1

    def test_save_without_revision_targets_latest(self) -> None:
        store = InMemoryNodeStore()
        store.add(make_node(1, langcode="en"), make_node(1, langcode="de", publish_on=10))
        stale = store.get(1, "de")
        node = store.get(1, "en")
        node.new_revision = True
        latest = store.save(node)

        stale.publish_on = None
        store.save(stale)

        assert store.get(1, "de").publish_on is None
        assert store.get(1, "de").vid == latest.vid

    def test_save_new_revision_copies_siblings(self) -> None:
        store = InMemoryNodeStore()
        first = store.add(make_node(1, langcode="en"), make_node(1, langcode="fr", title="Un"))
        node = store.get(1, "en")
        node.status = True
        node.new_revision = True

        saved = store.save(node)

        assert store.revision_ids(1) == [first.vid, saved.vid]
        latest = store.load(1)
        assert latest is not None
        assert latest.translation_languages() == ["en", "fr"]
        assert latest.get_translation("fr").title == "Un"
        assert latest.get_translation("fr").vid == saved.vid
        old = store.load_revision(first.vid)
        assert old is not None
        assert old.get_translation("en").status is False

    def test_save_unknown_node_adds_it(self) -> None:
        store = InMemoryNodeStore()
        saved = store.save(make_node(9))
        assert store.get(9).vid == saved.vid

    def test_add_rejects_mixed_nodes(self) -> None:
        store = InMemoryNodeStore()
        with pytest.raises(ValueError):
            store.add(make_node(1), make_node(2, langcode="fr"))
        with pytest.raises(ValueError):
            store.add()

    def test_missing_node(self) -> None:
        store = InMemoryNodeStore()
        assert store.load(1) is None
        assert store.load_revision(1) is None
        with pytest.raises(KeyError):
            store.get(1)


class TestActions:
    def test_resolve_action_id(self) -> None:
        assert resolve_action_id(ScheduleAction.PUBLISH, False) == "node_publish_action"
        assert resolve_action_id(ScheduleAction.UNPUBLISH, False) == "node_unpublish_action"
        assert (
            resolve_action_id(ScheduleAction.PUBLISH, True) == "state_change__node__published"
        )
        assert resolve_action_id(ScheduleAction.UNPUBLISH, True) == "state_change__node__archived"

    def test_default_registry_has_moderation_actions_only(self) -> None:
        registry = create_action_registry(InMemoryNodeStore())
        assert registry.ids == ["state_change__node__published", "state_change__node__archived"]
        assert registry.load("node_publish_action") is None

    def test_set_status_action_saves(self) -> None:
        store = InMemoryNodeStore()
        store.add(make_node(1, status=True))
        registry = ActionRegistry([SetStatusAction(store, ScheduleAction.UNPUBLISH)])

        action = registry.load("node_unpublish_action")
        assert action is not None
        action.execute(store.get(1))

        assert store.get(1).status is False

        registry.remove("node_unpublish_action")
        assert registry.ids == []
