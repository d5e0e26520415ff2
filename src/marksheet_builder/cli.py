#!/usr/bin/env python3
"""
Marksheet command line.

Share and export a class marks table from a roster CSV:

  marksheet entry  --roster class_7.csv --class 7 --subject Math --test 3 --copy
  marksheet master --roster class_7.csv --class 7 --subject Math --xlsx --output-dir out/
  marksheet set-date --class 7 --subject Math --test 3 --date 2025-11-24
  marksheet update-mark --roster class_7.csv --subject Math --test 3 --student-id 12 --value a
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .data_models import ExportContext, FormatConfig, SlotKey
from .date_store import TestDateStore
from .mark_classifier import mark_style
from .report_generator import MarksheetReportGenerator
from .roster_loader import RosterLoader, apply_mark_update, save_roster
from .sinks import ClipboardSink, FileClipboardSink, PyperclipClipboardSink

logger = logging.getLogger(__name__)

DEFAULT_DATES_FILE = "test_dates.json"


def _add_roster_args(parser: argparse.ArgumentParser, need_test: bool) -> None:
    parser.add_argument("--roster", required=True, help="Class roster CSV (id, name, roll_no, <subject>_test_<n>...).")
    parser.add_argument("--class", dest="class_name", required=True, help="Class level, e.g. 7.")
    parser.add_argument("--subject", required=True, help="Subject name, e.g. 'Pakistan Studies'.")
    if need_test:
        parser.add_argument("--test", dest="test_no", type=int, required=True, help="Test number (1-based).")


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dates-file", default=DEFAULT_DATES_FILE, help="JSON file holding test dates.")
    parser.add_argument("--name-width", type=int, default=12, help="Name column width in text tables.")
    parser.add_argument(
        "--copy",
        action="store_true",
        help="Copy the text table to the clipboard (plain text only; --payload-dir keeps the HTML table).",
    )
    parser.add_argument("--payload-dir", help="Write the text and HTML payloads into this directory.")
    parser.add_argument("--xlsx", action="store_true", help="Export the .xlsx workbook.")
    parser.add_argument("--output-dir", default=".", help="Directory for the workbook export.")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Command line arguments. Defaults to sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(prog="marksheet", description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    entry = subparsers.add_parser("entry", help="Single-test table.")
    _add_roster_args(entry, need_test=True)
    entry.add_argument("--max-marks", type=float, default=100, help="Maximum marks for the test.")
    entry.add_argument("--date", help="Test date (YYYY-MM-DD); defaults to the stored date.")
    entry.add_argument("--show-status", action="store_true", help="List each student's mark status.")
    _add_output_args(entry)

    master = subparsers.add_parser("master", help="Master sheet across all tests.")
    _add_roster_args(master, need_test=False)
    _add_output_args(master)

    set_date = subparsers.add_parser("set-date", help="Record a test date.")
    set_date.add_argument("--class", dest="class_name", required=True)
    set_date.add_argument("--subject", required=True)
    set_date.add_argument("--test", dest="test_no", type=int, required=True)
    set_date.add_argument("--date", required=True, help="YYYY-MM-DD")
    set_date.add_argument("--dates-file", default=DEFAULT_DATES_FILE)

    update = subparsers.add_parser("update-mark", help="Commit one mark into a roster CSV.")
    update.add_argument("--roster", required=True)
    update.add_argument("--subject", required=True)
    update.add_argument("--test", dest="test_no", type=int, required=True)
    update.add_argument("--student-id", required=True)
    update.add_argument("--value", default="", help="Mark, A, NA, or blank / '-' to clear.")

    return parser.parse_args(argv)


def _setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _load_roster(path: str) -> Optional[list]:
    loader = RosterLoader(path)
    if not loader.load():
        for error in loader.validation_errors:
            logger.error(f"❌ {error}")
        return None
    return loader.students


def _deliver(args: argparse.Namespace, text: str, html: str) -> bool:
    """Send payloads to the requested sinks; print the text when none was asked for"""
    sinks: List[ClipboardSink] = []
    if args.copy:
        sinks.append(PyperclipClipboardSink())
    if args.payload_dir:
        sinks.append(FileClipboardSink(args.payload_dir))
    if not sinks and not args.xlsx:
        print(text)
        return True

    ok = True
    for sink in sinks:
        ok &= sink.write(text, html)
    return ok


def _run_entry(args: argparse.Namespace) -> int:
    roster = _load_roster(args.roster)
    if roster is None:
        return 1

    try:
        config = FormatConfig(name_width_cap=args.name_width)
        context = ExportContext(
            class_name=args.class_name,
            subject=args.subject,
            test_no=args.test_no,
            max_marks=args.max_marks,
            test_date=args.date,
        )
    except ValueError as e:
        logger.error(f"❌ {e}")
        return 1
    generator = MarksheetReportGenerator(config, TestDateStore(Path(args.dates_file)), args.output_dir)

    if args.show_status:
        for student in roster:
            value = student.mark_for(args.subject, args.test_no)
            print(f"{student.roll_no:>4}  {student.name:<25} {value or '':>5}  {mark_style(value, config)}")

    payload = generator.entry_payload(roster, context)
    ok = _deliver(args, payload.text, payload.html)
    if args.xlsx:
        ok &= generator.export_entry_workbook(roster, context)
    return 0 if ok else 1


def _run_master(args: argparse.Namespace) -> int:
    roster = _load_roster(args.roster)
    if roster is None:
        return 1

    try:
        config = FormatConfig(name_width_cap=args.name_width)
        context = ExportContext(class_name=args.class_name, subject=args.subject)
    except ValueError as e:
        logger.error(f"❌ {e}")
        return 1
    generator = MarksheetReportGenerator(config, TestDateStore(Path(args.dates_file)), args.output_dir)

    payload = generator.master_payload(roster, context)
    ok = _deliver(args, payload.text, payload.html)
    if args.xlsx:
        ok &= generator.export_master_workbook(roster, context)
    return 0 if ok else 1


def _run_set_date(args: argparse.Namespace) -> int:
    store = TestDateStore(Path(args.dates_file))
    try:
        store.set(args.class_name, args.subject, args.test_no, args.date)
    except (ValueError, OSError) as e:
        logger.error(f"❌ {e}")
        return 1
    return 0


def _run_update_mark(args: argparse.Namespace) -> int:
    roster = _load_roster(args.roster)
    if roster is None:
        return 1
    try:
        slot = SlotKey(subject=args.subject, test_no=args.test_no)
        roster = apply_mark_update(roster, args.student_id, slot, args.value)
        save_roster(roster, args.roster)
    except (KeyError, ValueError, OSError) as e:
        logger.error(f"❌ Failed to save mark: {e}")
        return 1
    return 0


COMMANDS = {
    "entry": _run_entry,
    "master": _run_master,
    "set-date": _run_set_date,
    "update-mark": _run_update_mark,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_arguments(argv)
    _setup_logging(verbose=args.verbose)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
