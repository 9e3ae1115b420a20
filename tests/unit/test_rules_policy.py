"""
Tests for loading scheduler rules and resolving per-type policies.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from node_scheduler.app_shell.config import validate_rules
from node_scheduler.domain.entities import ScheduleAction
from node_scheduler.domain.policy import SchedulingPolicies, resolve_policy
from node_scheduler.rules.loader import load_rules, parse_rules
from node_scheduler.rules.models import NodeTypeSettings, Rules, SchedulerSettings


class TestLoader:
    def test_plain_yaml(self) -> None:
        rules = parse_rules("node_types:\n  article:\n    publish_enable: true\n")
        assert rules.node_types["article"].publish_enable is True
        assert rules.node_types["article"].unpublish_enable is None

    def test_markdown_fence(self) -> None:
        content = (
            "# Scheduler rules\n\n"
            "Some notes.\n\n"
            "```yaml\n"
            "scheduler:\n"
            "  log: false\n"
            "```\n\n"
            "```yaml\n"
            "scheduler:\n"
            "  log: true\n"
            "```\n"
        )
        assert parse_rules(content).scheduler.log is False

    def test_empty_document_uses_defaults(self) -> None:
        rules = parse_rules("")
        assert rules.scheduler.display_timezone == "Europe/London"
        assert rules.node_types == {}

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ValueError, match="Invalid YAML"):
            parse_rules("scheduler: [unclosed")

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules("scheduler:\n  publish_everything: true\n")

    def test_load_rules_file(self, tmp_path: Path) -> None:
        path = tmp_path / "scheduler.yaml"
        path.write_text("node_types:\n  page:\n    label: Basic page\n")

        assert load_rules(path).node_types["page"].label == "Basic page"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yaml")


class TestPolicies:
    def test_type_settings_override_defaults(self) -> None:
        defaults = SchedulerSettings(default_publish_enable=True, default_publish_revision=True)
        policy = resolve_policy(
            "news_item", NodeTypeSettings(publish_revision=False), defaults
        )

        assert policy.label == "News item"
        assert policy.publish_enable is True
        assert policy.publish_revision is False
        assert policy.revision_log_required is False

    def test_is_enabled_and_creates_revision(self) -> None:
        policy = resolve_policy(
            "article",
            NodeTypeSettings(publish_enable=True, unpublish_revision=True),
            SchedulerSettings(),
        )
        assert policy.is_enabled(ScheduleAction.PUBLISH) is True
        assert policy.is_enabled(ScheduleAction.UNPUBLISH) is False
        assert policy.creates_revision(ScheduleAction.PUBLISH) is False
        assert policy.creates_revision(ScheduleAction.UNPUBLISH) is True

    def test_enabled_types_in_configuration_order(self, policies: SchedulingPolicies) -> None:
        assert policies.enabled_types(ScheduleAction.PUBLISH) == [
            "article",
            "page",
            "blog",
            "event",
        ]
        assert policies.enabled_types(ScheduleAction.UNPUBLISH) == ["article", "blog"]
        assert policies.type_ids == ["article", "page", "blog", "event"]

    def test_unconfigured_type_gets_defaults(self) -> None:
        rules = Rules(scheduler=SchedulerSettings(default_unpublish_enable=True))
        policies = SchedulingPolicies(rules)

        policy = policies.for_type("landing_page")

        assert policy.unpublish_enable is True
        assert policy.label == "Landing page"
        assert policies.for_type("landing_page") is policy
        assert policies.enabled_types(ScheduleAction.UNPUBLISH) == []


class TestValidateRules:
    def test_warns_when_nothing_enabled(self, caplog: pytest.LogCaptureFixture) -> None:
        warnings = validate_rules(Rules())

        assert warnings == [
            "No node type is enabled for scheduled publishing.",
            "No node type is enabled for scheduled unpublishing.",
        ]
        assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.WARNING]

    def test_clean_rules(self, rules: Rules) -> None:
        assert validate_rules(rules) == []

    def test_unknown_timezone(self) -> None:
        rules = Rules(scheduler=SchedulerSettings(display_timezone="Mars/Olympus_Mons"))
        with pytest.raises(ValueError, match="Unknown display timezone"):
            validate_rules(rules)

    def test_warns_when_required_log_has_no_revision(self) -> None:
        rules = parse_rules(
            "node_types:\n"
            "  news:\n"
            "    label: News\n"
            "    publish_enable: true\n"
            "    publish_revision: true\n"
            "    unpublish_enable: true\n"
            "    revision_log_required: true\n"
        )

        assert validate_rules(rules) == [
            "Node type 'News' requires revision log messages but "
            "scheduled unpublishing does not create a revision."
        ]
