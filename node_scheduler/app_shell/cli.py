import argparse
import logging
import sys
from pathlib import Path

from node_scheduler.app_shell.config import validate_rules
from node_scheduler.app_shell.context import SchedulerContext
from node_scheduler.components.scheduler import CronOptions, SchedulerError
from node_scheduler.rules.loader import load_rules

logger = logging.getLogger("cli")

DB_PATH = "scheduler.db"
RULES_PATH = "scheduler.yaml"


def get_context(args: argparse.Namespace) -> SchedulerContext:
    rules_path = Path(args.rules)
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    try:
        rules = load_rules(rules_path)
        validate_rules(rules)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    return SchedulerContext.create(args.db, rules)


def handle_cron(ctx: SchedulerContext, args: argparse.Namespace) -> None:
    ctx.manager.run_lightweight_cron(CronOptions(nolog=args.nolog, trigger="drush"))


def handle_publish(ctx: SchedulerContext, args: argparse.Namespace) -> None:
    if ctx.manager.publish():
        print("Scheduled nodes published.")
    else:
        print("No nodes due for publishing.")


def handle_unpublish(ctx: SchedulerContext, args: argparse.Namespace) -> None:
    if ctx.manager.unpublish():
        print("Scheduled nodes unpublished.")
    else:
        print("No nodes due for unpublishing.")


HANDLERS = {
    "cron": handle_cron,
    "publish": handle_publish,
    "unpublish": handle_unpublish,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="node-scheduler", description="Scheduled publishing of content nodes"
    )
    parser.add_argument("--db", default=DB_PATH, help="Path to the SQLite database")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to the scheduler rules file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # cron
    cron_parser = subparsers.add_parser("cron", help="Run the lightweight scheduler cron")
    cron_parser.add_argument(
        "--nolog", action="store_true", help="Do not log the start and end of the run"
    )

    # publish / unpublish
    subparsers.add_parser("publish", help="Publish nodes whose publish date has passed")
    subparsers.add_parser("unpublish", help="Unpublish nodes whose unpublish date has passed")

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    ctx = get_context(args)

    try:
        HANDLERS[args.command](ctx, args)
    except SchedulerError as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
