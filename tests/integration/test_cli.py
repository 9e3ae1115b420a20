"""
Integration tests for the node-scheduler command line.
"""

from __future__ import annotations

import logging

import pytest

from node_scheduler.adapters.sqlite.migrator import SQLiteMigrator
from node_scheduler.adapters.sqlite.repos import SQLiteNodeStore
from node_scheduler.app_shell import cli
from node_scheduler.components.scheduler import hook_registry
from tests.factories import RULES_YAML, make_node


@pytest.fixture
def paths(tmp_path):
    db = tmp_path / "scheduler.db"
    rules = tmp_path / "scheduler.yaml"
    rules.write_text(RULES_YAML)
    SQLiteMigrator(str(db)).run_migrations()
    return str(db), str(rules)


@pytest.fixture(autouse=True)
def clean_hooks():
    hook_registry.clear()
    yield
    hook_registry.clear()


def test_publish_command(paths, capsys) -> None:
    db, rules = paths
    SQLiteNodeStore(db).add(make_node(1, publish_on=1))

    cli.main(["--db", db, "--rules", rules, "publish"])

    assert "Scheduled nodes published." in capsys.readouterr().out
    assert SQLiteNodeStore(db).get(1).status is True


def test_unpublish_command_with_nothing_due(paths, capsys) -> None:
    db, rules = paths

    cli.main(["--db", db, "--rules", rules, "unpublish"])

    assert "No nodes due for unpublishing." in capsys.readouterr().out


def test_cron_command_logs_run(paths, caplog) -> None:
    db, rules = paths
    caplog.set_level(logging.INFO)
    SQLiteNodeStore(db).add(make_node(1, status=True, unpublish_on=1))

    cli.main(["--db", db, "--rules", rules, "cron"])

    assert "Lightweight cron run activated by drush command." in caplog.text
    assert SQLiteNodeStore(db).get(1).status is False


def test_cron_command_nolog(paths, caplog) -> None:
    db, rules = paths
    caplog.set_level(logging.INFO)

    cli.main(["--db", db, "--rules", rules, "cron", "--nolog"])

    assert "Lightweight cron" not in caplog.text


def test_scheduler_error_exits(paths, caplog) -> None:
    db, rules = paths
    SQLiteNodeStore(db).add(make_node(7, type="page", status=True, unpublish_on=1))
    hook_registry.register("nid_list", lambda action: [7])

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--db", db, "--rules", rules, "unpublish"])

    assert exc_info.value.code == 1
    assert "is not enabled for scheduled unpublishing" in caplog.text


def test_missing_rules_file_exits(tmp_path, caplog) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--db", str(tmp_path / "x.db"), "--rules", str(tmp_path / "none.yaml"), "cron"])

    assert exc_info.value.code == 1
    assert "not found" in caplog.text


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
