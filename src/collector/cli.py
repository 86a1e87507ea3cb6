"""collector CLI: edit, validate and submit a project record from the terminal."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from collector.errors.exceptions import CollectorError


def _open_session(args: argparse.Namespace):
    """Rehydrate the store from the local slot and wire a session around it."""
    from collector.config import settings
    from collector.services.record_store import RecordStore
    from collector.services.session import FormSession
    from collector.services.submission import SubmissionPipeline
    from collector.storage.local_slot import LocalSlotPersistence

    storage_dir = Path(args.directory) if args.directory else Path(settings.storage_dir)
    persistence = LocalSlotPersistence(storage_dir, settings.storage_slot)
    store = RecordStore.open(persistence)
    pipeline = SubmissionPipeline(
        store,
        args.endpoint or settings.endpoint_url,
        timeout=settings.submit_timeout_seconds,
    )
    return FormSession(store, pipeline)


def _print_errors(errors: dict[str, str]) -> None:
    for key, message in errors.items():
        print(f"  {key}: {message}")


def cmd_show(args: argparse.Namespace) -> None:
    """Print the current record and progress."""
    snapshot = _open_session(args).snapshot()
    record = snapshot.record.to_storage()
    resources = record.pop("resources")
    for key, value in record.items():
        print(f"{key:>17}: {value}")
    print("        resources:")
    for position, item in enumerate(resources):
        print(f"  [{position}] {item['id']}  {item['remark']!r}  {item['link']!r}")
    print(f"         progress: {snapshot.progress}%")


def cmd_set(args: argparse.Namespace) -> None:
    """Set one field, then validate it as if the input lost focus."""
    session = _open_session(args)
    session.change(args.field, args.value)
    error = session.blur(args.field)
    if error:
        print(f"{args.field}: {error}", file=sys.stderr)
    else:
        print(f"Set {args.field}")


def cmd_resource(args: argparse.Namespace) -> None:
    """Add, update, remove or move a resource citation."""
    session = _open_session(args)
    action = args.action

    if action == "add":
        item = session.add_resource()
        if args.remark:
            session.change_resource(item.id, "remark", args.remark)
        if args.link:
            session.change_resource(item.id, "link", args.link)
            error = session.blur_resource(item.id)
            if error:
                print(f"{item.id}: {error}", file=sys.stderr)
        print(f"Added: {item.id}")
        return

    if not args.id:
        print("Error: resource id is required", file=sys.stderr)
        sys.exit(1)

    if action == "update":
        if args.remark is not None:
            session.change_resource(args.id, "remark", args.remark)
        if args.link is not None:
            session.change_resource(args.id, "link", args.link)
        error = session.blur_resource(args.id)
        if error:
            print(f"{args.id}: {error}", file=sys.stderr)
        print(f"Updated: {args.id}")
    elif action == "remove":
        session.remove_resource(args.id)
        print(f"Removed: {args.id}")
    elif action == "move":
        if args.position is None:
            print("Error: --position is required", file=sys.stderr)
            sys.exit(1)
        session.reorder_resource(args.id, args.position)
        print(f"Moved: {args.id}")


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate every field and report whether the form can be submitted."""
    session = _open_session(args)
    errors = session.validate_all()
    if errors:
        print("Field errors:")
        _print_errors(errors)
    print("Ready to submit." if session.can_submit() else "Not ready to submit.")
    if not session.can_submit():
        sys.exit(1)


def cmd_progress(args: argparse.Namespace) -> None:
    snapshot = _open_session(args).snapshot()
    print(f"Progress: {snapshot.progress}%")
    for status in snapshot.sections:
        mark = "x" if status.complete else " "
        print(f"  [{mark}] {status.step}. {status.section}")


def cmd_submit(args: argparse.Namespace) -> None:
    """Submit the record; project fields are cleared on success."""
    session = _open_session(args)
    result = asyncio.run(session.submit())
    print(f"{result.title} {result.message}")
    if result.field_errors:
        _print_errors(result.field_errors)
    if result.error:
        print(f"  {result.error.code}: {result.error.message}", file=sys.stderr)
    if args.json:
        print(json.dumps(result.model_dump(mode="json", exclude_none=True), indent=2))
    if not result.ok:
        sys.exit(1)


def cmd_clear(args: argparse.Namespace) -> None:
    """Remove every entered value, identity included."""
    if not args.yes:
        print("Refusing to clear without --yes (this cannot be undone).", file=sys.stderr)
        sys.exit(1)
    _open_session(args).reset_all()
    print("Form Cleared: All fields have been reset.")


def cmd_reset_project(args: argparse.Namespace) -> None:
    _open_session(args).reset_project_fields()
    print("Project Details Cleared: Project-specific fields have been reset.")


def main(argv: list[str] | None = None) -> None:
    from collector.config import settings
    from collector.logging_config import configure_logging

    parser = argparse.ArgumentParser(
        prog="collector",
        description="Collect a project submission and send it to the collector endpoint",
    )
    parser.add_argument("-d", "--directory", help="Slot directory (default: COLLECTOR_STORAGE_DIR)")
    parser.add_argument("--endpoint", help="Collector endpoint URL (overrides settings)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: settings)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Show the current record")

    p_set = sub.add_parser("set", help="Set a record field")
    p_set.add_argument("field", help="Field name, e.g. name, linkedin, problemStatement")
    p_set.add_argument("value", help="New value")

    p_res = sub.add_parser("resource", help="Manage resource citations")
    p_res.add_argument("action", choices=["add", "update", "remove", "move"], help="Resource action")
    p_res.add_argument("id", nargs="?", help="Resource id (for update/remove/move)")
    p_res.add_argument("--remark", help="Resource description")
    p_res.add_argument("--link", help="Resource URL")
    p_res.add_argument("--position", type=int, help="Target position (for move)")

    sub.add_parser("validate", help="Validate every field")
    sub.add_parser("progress", help="Show completion progress")

    p_submit = sub.add_parser("submit", help="Submit the project")
    p_submit.add_argument("--json", action="store_true", help="Also print the result as JSON")

    p_clear = sub.add_parser("clear", help="Clear all fields")
    p_clear.add_argument("--yes", action="store_true", help="Confirm clearing everything")

    sub.add_parser("reset-project", help="Clear project fields, keep identity")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level or settings.log_level, json_output=settings.json_logs)

    commands = {
        "show": cmd_show,
        "set": cmd_set,
        "resource": cmd_resource,
        "validate": cmd_validate,
        "progress": cmd_progress,
        "submit": cmd_submit,
        "clear": cmd_clear,
        "reset-project": cmd_reset_project,
    }
    try:
        commands[args.command](args)
    except CollectorError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
