"""CLI entry point for CalPlanner."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .app import Planner
from .config import config
from .sync.engine import SyncResult
from .utils.exceptions import CalPlannerError
from .utils.logging import setup_logging


def _print_sync_result(result: SyncResult) -> None:
    print(f"Calendar {result.calendar_id} synchronized:")
    print(f"  Modules created: {result.modules_created}")
    print(f"  Modules removed: {result.modules_removed}")
    print(f"  Events created: {result.events_created}")
    if result.entries_skipped:
        print(f"  Entries skipped: {result.entries_skipped}")


def _write_output(payload: str, output: Optional[Path]) -> None:
    if output:
        output.write_text(payload, encoding="utf-8", newline="")
        print(f"✅ Written to {output}")
    else:
        sys.stdout.write(payload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CalPlanner - Aggregate calendar feeds into filterable project schedules"
    )
    parser.add_argument("--init-db", action="store_true", help="Create or migrate the database and exit")
    parser.add_argument("--create-project", metavar="NAME", help="Create a project")

    parser.add_argument("--add-calendar", metavar="URL", help="Subscribe a project to a feed URL")
    parser.add_argument("--project", type=int, help="Project ID used by --add-calendar")
    parser.add_argument(
        "--exclusive",
        action="store_true",
        help="New modules of the added calendar start hidden (default: visible)",
    )
    parser.add_argument("--label", help="Label of the added calendar")
    parser.add_argument("--color", help="Color of the added calendar (#RRGGBB)")

    parser.add_argument("--sync", type=int, metavar="CALENDAR_ID", help="Synchronize a calendar")
    parser.add_argument(
        "--sync-project", type=int, metavar="PROJECT_ID", help="Synchronize every calendar of a project"
    )
    parser.add_argument(
        "--list-calendars", type=int, metavar="PROJECT_ID", help="List the calendars of a project"
    )
    parser.add_argument(
        "--list-modules", type=int, metavar="CALENDAR_ID", help="List the modules of a calendar"
    )
    parser.add_argument("--select", type=int, metavar="MODULE_ID", help="Show a module")
    parser.add_argument("--deselect", type=int, metavar="MODULE_ID", help="Hide a module")

    parser.add_argument("--events", type=int, metavar="PROJECT_ID", help="List visible events of a project")
    parser.add_argument("--view-start", help="Window start for --events (ISO-8601)")
    parser.add_argument("--view-end", help="Window end for --events (ISO-8601)")

    parser.add_argument(
        "--export-ics", type=int, metavar="PROJECT_ID", help="Export visible events as iCalendar"
    )
    parser.add_argument(
        "--export-config", type=int, metavar="PROJECT_ID", help="Export a project configuration as JSON"
    )
    parser.add_argument(
        "--import-config", type=Path, metavar="PATH", help="Create a project from a JSON/YAML configuration"
    )
    parser.add_argument("--output", "-o", type=Path, help="Output file for exports (default: stdout)")

    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        planner = Planner.from_config(config)

        if args.init_db:
            logger.info(f"Database ready at {config.database_url}")
            return 0

        if args.create_project:
            project_id = planner.projects.create(args.create_project)
            print(f"Created project {project_id}")
            return 0

        if args.add_calendar:
            if args.project is None:
                logger.error("--add-calendar requires --project")
                return 1
            calendar = planner.calendars.create(
                args.project,
                {
                    "url": args.add_calendar,
                    "type": not args.exclusive,
                    "label": args.label,
                    "color": args.color,
                },
            )
            print(f"Created calendar {calendar.calendar_id} ({calendar.module_count or 0} modules)")
            return 0

        if args.sync is not None:
            _print_sync_result(planner.calendars.sync(args.sync))
            return 0

        if args.sync_project is not None:
            failed = 0
            for calendar_id, outcome in planner.calendars.sync_project(args.sync_project).items():
                if isinstance(outcome, SyncResult):
                    _print_sync_result(outcome)
                else:
                    failed += 1
                    print(f"❌ Calendar {calendar_id}: {outcome}")
            return 1 if failed else 0

        if args.list_calendars is not None:
            calendars = planner.calendars.list_for_project(args.list_calendars)
            print(f"Found {len(calendars)} calendar(s):")
            for cal in calendars:
                mode = "inclusive" if cal.type else "exclusive"
                print(f"  - {cal.label or cal.url} (ID: {cal.calendar_id}, {mode}, {cal.color})")
                print(f"    Modules: {cal.module_count}, last synced: {cal.last_synced or 'never'}")
            return 0

        if args.list_modules is not None:
            modules = planner.modules.list_by_calendar(args.list_modules)
            print(f"Found {len(modules)} module(s):")
            for module in modules:
                mark = "x" if module.is_selected else " "
                print(f"  [{mark}] {module.name} (ID: {module.module_id})")
            return 0

        if args.select is not None or args.deselect is not None:
            selected = args.select is not None
            module = planner.modules.set_selection(
                args.select if selected else args.deselect, selected
            )
            print(f"Module {module.name} is now {'visible' if module.is_selected else 'hidden'}")
            return 0

        if args.events is not None:
            events = planner.schedule.list_events(args.events, args.view_start, args.view_end)
            print(f"Found {len(events)} event(s):")
            for event in events:
                print(f"  - [{event.module_name}] {event.title}")
                print(f"    When: {event.start} to {event.end}")
                if event.location:
                    print(f"    Location: {event.location}")
            return 0

        if args.export_ics is not None:
            output = args.output or Path(planner.projects.ics_filename(args.export_ics))
            _write_output(planner.projects.export_ics(args.export_ics), output)
            return 0

        if args.export_config is not None:
            exported = planner.projects.export_config(args.export_config)
            _write_output(json.dumps(exported.model_dump(), indent=2, ensure_ascii=False) + "\n", args.output)
            return 0

        if args.import_config:
            project_id = planner.projects.import_config(args.import_config.read_text(encoding="utf-8"))
            print(f"Imported project {project_id}")
            return 0

        # No action specified
        parser.print_help()
        return 0

    except CalPlannerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
