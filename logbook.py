#!/usr/bin/env python3
"""
Unified CLI for vehicle service logs.

Commands:
  list          - Show committed logs, with search and filters
  add           - Commit a new service log
  edit          - Change fields of a committed log
  delete        - Remove a committed log
  drafts        - List drafts
  new-draft     - Start a new draft and make it active
  use-draft     - Make another draft active
  delete-draft  - Delete the active draft
  clear-drafts  - Delete all drafts
  form          - Save field values into the active draft or scratch form
  show          - Show the values currently in the form
  submit        - Commit the active draft or scratch form
  check         - Validate every committed log
"""

import argparse
import sys
from pathlib import Path
from tabulate import tabulate
from typing import Any, Dict, Iterable, List, Optional

from servicelogs import (
    ALL_TYPES,
    DateRange,
    Draft,
    FilterCriteria,
    LogType,
    NotFoundError,
    ServiceLog,
    ServiceLogStore,
    ValidationResult,
    adjust_end_date,
    filter_logs,
    form_values_for,
    new_draft_seed,
    validate,
)

# Flag dest -> form field name
FIELD_ARGS = {
    "provider": "providerId",
    "order": "serviceOrder",
    "car": "carId",
    "odometer": "odometer",
    "hours": "engineHours",
    "start": "startDate",
    "end": "endDate",
    "type": "type",
    "description": "serviceDescription",
}

# =============================================================================
# Formatting helpers
# =============================================================================


def format_number(value: Optional[float]) -> str:
    """Format odometer / engine hours for display."""
    return f"{value:,.0f}" if isinstance(value, (int, float)) else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def short_id(item_id: str) -> str:
    return item_id[:8]


def make_log_table(logs: Iterable[ServiceLog]) -> List[List[str]]:
    """Convert logs to table rows."""
    rows = []
    for log in logs:
        rows.append(
            [
                short_id(log.id),
                log.start_date,
                log.end_date,
                log.type,
                log.car_id,
                log.provider_id,
                log.service_order,
                format_number(log.odometer),
                format_number(log.engine_hours),
                truncate(log.service_description),
            ]
        )
    return rows


def make_draft_table(drafts: Iterable[Draft], active_id: Optional[str]) -> List[List[str]]:
    """Convert drafts to table rows; the active draft is marked with '*'."""
    rows = []
    for i, draft in enumerate(drafts):
        rows.append(
            [
                "*" if draft.id == active_id else "",
                short_id(draft.id),
                draft.label(i),
                "yes" if draft.is_saved else "no",
                draft.created_at[:19],
            ]
        )
    return rows


def print_errors(result: ValidationResult) -> None:
    print("Error: log is not valid")
    for name, message in result.errors.items():
        print(f"  {name}: {message}")


def fields_from_args(args) -> Dict[str, Any]:
    """Form fields given on the command line (unset flags are left out)."""
    fields = {}
    for dest, name in FIELD_ARGS.items():
        value = getattr(args, dest, None)
        if value is not None:
            fields[name] = value
    return fields


def resolve_id(ids: Iterable[str], prefix: str, kind: str) -> str:
    """Match a full id or a unique id prefix."""
    ids = list(ids)
    if prefix in ids:
        return prefix
    matches = [i for i in ids if i.startswith(prefix)]
    if len(matches) != 1:
        raise NotFoundError(kind, prefix)
    return matches[0]


# =============================================================================
# Log commands
# =============================================================================


def cmd_list(args, store: ServiceLogStore):
    """Show committed logs, with search and filters."""
    state = store.state
    criteria = FilterCriteria(
        query=args.query or "",
        type=args.type,
        date_range=DateRange(start=args.date_from, end=args.date_to),
    )
    logs = filter_logs(state.logs, criteria)

    print(f"Total logs: {len(state.logs)}")
    if logs != list(state.logs):
        print(f"Showing: {len(logs)} (filtered)")
    print()

    if not logs:
        print("No service logs found.")
        return 0

    headers = ["ID", "Start", "End", "Type", "Car", "Provider", "Order", "Odometer", "Hours", "Description"]
    print(tabulate(make_log_table(logs), headers=headers, tablefmt="simple"))
    return 0


def cmd_add(args, store: ServiceLogStore):
    """Commit a new service log from the command-line fields."""
    fields = fields_from_args(args)
    result = validate(fields)
    if not result.valid:
        print_errors(result)
        return 1

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    store.submit(fields)
    print(f"Log saved: {short_id(store.state.logs[0].id)}")
    return 0


def cmd_edit(args, store: ServiceLogStore):
    """Change fields of a committed log."""
    state = store.state
    log_id = resolve_id((log.id for log in state.logs), args.log_id, "log")
    changes = fields_from_args(args)

    if args.dry_run:
        result = validate(store.edited(log_id, changes).to_fields())
        if not result.valid:
            print_errors(result)
            return 1
        print("(dry run - no changes made)")
        return 0

    result = store.edit(log_id, changes)
    if not result.valid:
        print_errors(result)
        return 1
    print(f"Log updated: {short_id(log_id)}")
    return 0


def cmd_delete(args, store: ServiceLogStore):
    """Remove a committed log."""
    log_id = resolve_id((log.id for log in store.state.logs), args.log_id, "log")
    store.delete_log(log_id)
    print(f"Log deleted: {short_id(log_id)}")
    return 0


def cmd_check(args, store: ServiceLogStore):
    """Validate every committed log."""
    all_valid = True
    for log in store.state.logs:
        result = validate(log.to_fields())
        if result.valid:
            print(f"OK: {short_id(log.id)}")
            continue
        all_valid = False
        print(f"FAIL: {short_id(log.id)}")
        for name, message in result.errors.items():
            print(f"  {name}: {message}")
    return 0 if all_valid else 1


# =============================================================================
# Draft and form commands
# =============================================================================


def cmd_drafts(args, store: ServiceLogStore):
    """List drafts."""
    state = store.state
    if not state.drafts:
        print("No drafts.")
        return 0
    headers = ["", "ID", "Label", "Saved", "Created"]
    print(tabulate(make_draft_table(state.drafts, state.active_draft_id), headers=headers, tablefmt="simple"))
    return 0


def cmd_new_draft(args, store: ServiceLogStore):
    """Start a new draft and make it active."""
    seed = adjust_end_date({**new_draft_seed(), **fields_from_args(args)})
    state = store.create_draft(seed)
    print(f"Draft created: {short_id(state.active_draft_id)}")
    return 0


def cmd_use_draft(args, store: ServiceLogStore):
    """Make another draft active."""
    draft_id = resolve_id((d.id for d in store.state.drafts), args.draft_id, "draft")
    store.set_active_draft(draft_id)
    print(f"Active draft: {short_id(draft_id)}")
    return 0


def cmd_delete_draft(args, store: ServiceLogStore):
    """Delete the active draft."""
    if store.state.active_draft_id is None:
        print("Error: no active draft")
        return 1
    state = store.delete_draft()
    if state.active_draft_id:
        print(f"Draft deleted. Active draft: {short_id(state.active_draft_id)}")
    else:
        print("Draft deleted. No drafts left.")
    return 0


def cmd_clear_drafts(args, store: ServiceLogStore):
    """Delete all drafts."""
    count = len(store.state.drafts)
    if args.dry_run:
        print(f"Would delete {count} draft(s)")
        print("(dry run - no changes made)")
        return 0
    store.clear_all_drafts()
    print(f"Deleted {count} draft(s)")
    return 0


def cmd_form(args, store: ServiceLogStore):
    """Save field values into the active draft, or the scratch form."""
    state = store.state
    source = state.active_draft.data if state.active_draft else state.current_form
    values = adjust_end_date({**source, **fields_from_args(args)})
    state = store.autosave(values)
    target = "draft " + short_id(state.active_draft_id) if state.active_draft_id else "form"
    print(f"Saved to {target}")
    return 0


def cmd_show(args, store: ServiceLogStore):
    """Show the values currently in the form."""
    state = store.state
    if state.active_draft_id:
        print(f"Editing draft {short_id(state.active_draft_id)}")
    else:
        print("Editing new service log")
    rows = [[name, value] for name, value in form_values_for(state).items()]
    print(tabulate(rows, headers=["Field", "Value"], tablefmt="simple"))
    return 0


def cmd_submit(args, store: ServiceLogStore):
    """Commit the active draft or scratch form."""
    values = {**form_values_for(store.state), **fields_from_args(args)}
    result = validate(values)
    if not result.valid:
        print_errors(result)
        return 1

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    store.submit(values)
    print(f"Log saved: {short_id(store.state.logs[0].id)}")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_field_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags for each service log field."""
    parser.add_argument("--provider", type=str, help="Provider ID")
    parser.add_argument("--order", type=str, help="Service order number")
    parser.add_argument("--car", type=str, help="Car ID")
    parser.add_argument("--odometer", type=float, help="Odometer reading")
    parser.add_argument("--hours", type=float, help="Engine hours")
    parser.add_argument("--start", type=str, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="End date (YYYY-MM-DD)")
    parser.add_argument("--type", choices=LogType.values(), help="Service type")
    parser.add_argument("--description", type=str, help="Service description")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle service log book",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s logs.yaml list --query brake --type planned
  %(prog)s logs.yaml list --from 2024-01-01 --to 2024-03-31
  %(prog)s logs.yaml add --provider P1 --order SO-1 --car X1 \\
      --odometer 1200 --hours 40 --start 2024-01-05 --end 2024-01-06 \\
      --type planned --description "Oil and filter"
  %(prog)s logs.yaml new-draft --car X1
  %(prog)s logs.yaml form --odometer 100
  %(prog)s logs.yaml submit
""",
    )
    parser.add_argument(
        "state_file",
        type=Path,
        help="Path to the service log YAML file (created on first write)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show committed logs")
    list_parser.add_argument(
        "--query",
        type=str,
        help="Search provider, order, car, description and type (case-insensitive)",
    )
    list_parser.add_argument(
        "--type",
        choices=[ALL_TYPES] + LogType.values(),
        default=ALL_TYPES,
        help="Filter by service type (default: all)",
    )
    list_parser.add_argument(
        "--from", dest="date_from", type=str, help="Only logs starting on or after date (YYYY-MM-DD)"
    )
    list_parser.add_argument(
        "--to", dest="date_to", type=str, help="Only logs starting on or before date (YYYY-MM-DD)"
    )

    add_parser = subparsers.add_parser(
        "add", help="Commit a new service log (retires the active draft)"
    )
    add_field_arguments(add_parser)
    add_parser.add_argument("--dry-run", action="store_true", help="Validate without saving")

    edit_parser = subparsers.add_parser("edit", help="Change fields of a committed log")
    edit_parser.add_argument("log_id", type=str, help="Log ID (or unique prefix)")
    add_field_arguments(edit_parser)
    edit_parser.add_argument("--dry-run", action="store_true", help="Validate without saving")

    delete_parser = subparsers.add_parser("delete", help="Remove a committed log")
    delete_parser.add_argument("log_id", type=str, help="Log ID (or unique prefix)")

    subparsers.add_parser("drafts", help="List drafts")

    new_draft_parser = subparsers.add_parser("new-draft", help="Start a new draft")
    add_field_arguments(new_draft_parser)

    use_draft_parser = subparsers.add_parser("use-draft", help="Make another draft active")
    use_draft_parser.add_argument("draft_id", type=str, help="Draft ID (or unique prefix)")

    subparsers.add_parser("delete-draft", help="Delete the active draft")

    clear_parser = subparsers.add_parser("clear-drafts", help="Delete all drafts")
    clear_parser.add_argument("--dry-run", action="store_true", help="Show what would be deleted")

    form_parser = subparsers.add_parser(
        "form", help="Save field values into the active draft or scratch form"
    )
    add_field_arguments(form_parser)

    subparsers.add_parser("show", help="Show the values currently in the form")

    submit_parser = subparsers.add_parser(
        "submit", help="Commit the active draft or scratch form"
    )
    add_field_arguments(submit_parser)
    submit_parser.add_argument("--dry-run", action="store_true", help="Validate without saving")

    subparsers.add_parser("check", help="Validate every committed log")

    return parser


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "drafts": cmd_drafts,
    "new-draft": cmd_new_draft,
    "use-draft": cmd_use_draft,
    "delete-draft": cmd_delete_draft,
    "clear-drafts": cmd_clear_drafts,
    "form": cmd_form,
    "show": cmd_show,
    "submit": cmd_submit,
    "check": cmd_check,
}


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    store = ServiceLogStore(args.state_file)
    try:
        return COMMANDS[args.command](args, store)
    except NotFoundError as e:
        print(f"Error: {e}")
        return 1
    finally:
        # One-shot process: nothing is left to debounce
        store.settle(force=True)


if __name__ == "__main__":
    sys.exit(main() or 0)
