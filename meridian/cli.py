"""
meridian.cli
============

Command-line access to the worklist and status counts.

Examples
--------
$ meridian init-db
$ meridian tasks --priority high
$ meridian stats
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from meridian.errors import MeridianError
from meridian.models import EntityKind, Priority, TaskType


def _office():
    # imported lazily so `meridian --help` does not touch SQLite
    from meridian.service import BackOffice
    from meridian.store_db import DBStore

    return BackOffice(store=DBStore())


def cmd_init_db(args: argparse.Namespace) -> int:
    from meridian.db import create_all

    create_all()
    print("✅ meridian.db schema initialised")
    return 0


def cmd_tasks(args: argparse.Namespace) -> int:
    task_type = TaskType(args.type) if args.type else None
    priority = Priority(args.priority) if args.priority else None
    tasks = _office().get_upcoming_tasks(task_type, priority)
    if not tasks:
        print("No upcoming tasks.")
        return 0
    for t in tasks:
        print(
            f"{t.due_date:%Y-%m-%d}  {t.priority.value:<6}  {t.type.value:<13}  "
            f"#{t.id:<5} {t.customer_name}: {t.task_description} [{t.status}]"
        )
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    office = _office()
    for kind in (EntityKind.ENQUIRY, EntityKind.QUOTATION):
        counts = office.status_counts(kind)
        print(f"{kind.name}: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    summary = office.task_summary()
    print("TASKS: " + ", ".join(f"{k}={v}" for k, v in summary["by_priority"].items()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meridian", description="Meridian back-office utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables").set_defaults(func=cmd_init_db)

    tasks = sub.add_parser("tasks", help="print the upcoming worklist")
    tasks.add_argument("--type", choices=[t.value for t in TaskType])
    tasks.add_argument("--priority", choices=[p.value for p in Priority])
    tasks.set_defaults(func=cmd_tasks)

    sub.add_parser("stats", help="status counts and task totals").set_defaults(func=cmd_stats)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except MeridianError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
