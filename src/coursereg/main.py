"""CLI entrypoint for the course selection shell."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from .catalog import Catalog
from .config import (
    ALL_DOMAINS,
    DEFAULT_DB_PATH,
    DEFAULT_EXPORT_NAME,
    DEFAULT_KEY_PREFIX,
    DEFAULT_MAX_CREDITS,
    DEFAULT_MIN_CREDITS,
    EngineConfig,
)
from .content_loader import load_catalog
from .engine import Accepted, SelectionEngine
from .errors import MalformedDraft, StorageError, UnknownCourseCode
from .storage import SqliteStore

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
MENU_QUIT_COMMANDS = {"q"}
MENU_BACK_COMMANDS = {"b", ""}


class BrowseState:
    """Current domain filter and search text for the catalog view."""

    def __init__(self) -> None:
        self.domain = ALL_DOMAINS
        self.search = ""


def _engine(db_path: str, config: EngineConfig) -> SelectionEngine:
    """Create a selection engine over the bundled catalog and a local store."""
    target: Path | str = db_path if db_path == ":memory:" else Path(db_path)
    return SelectionEngine(load_catalog(), store=SqliteStore(target), config=config)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coursereg", description="Course selection with a credit range check")
    parser.add_argument("--db", default=str(DEFAULT_DB_PATH), help="draft database path (or :memory:)")
    parser.add_argument("--min-credits", type=int, default=DEFAULT_MIN_CREDITS)
    parser.add_argument("--max-credits", type=int, default=DEFAULT_MAX_CREDITS)
    parser.add_argument("--key-prefix", default=DEFAULT_KEY_PREFIX, help="storage key prefix")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        config = EngineConfig(min_credits=args.min_credits, max_credits=args.max_credits, key_prefix=args.key_prefix)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        engine = _engine(args.db, config)
    except StorageError as exc:
        print(f"Could not open draft store: {exc}")
        return 1
    return selection_shell(engine)


def selection_shell(engine: SelectionEngine, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run persistent menu-driven shell over one selection engine."""
    browse = BrowseState()
    try:
        if engine.restore_draft():
            print_fn(f"Restored saved draft ({len(engine.selected_codes)} course(s)).")
        while True:
            _print_header(engine, print_fn)
            print_fn("1) Browse courses")
            print_fn("2) Add/remove course")
            print_fn("3) Show selection")
            print_fn("4) Save draft")
            print_fn("5) Load saved draft")
            print_fn("6) Clear draft")
            print_fn("7) Export selection")
            print_fn("8) Submit")
            print_fn("q) Quit")
            choice = input_fn("Choose: ").strip().lower()

            if choice == "1":
                _browse_flow(engine, browse, input_fn, print_fn)
            elif choice == "2":
                _toggle_flow(engine, input_fn, print_fn)
            elif choice == "3":
                _selection_flow(engine, print_fn)
            elif choice == "4":
                print_fn(engine.save_draft().message)
            elif choice == "5":
                _load_flow(engine, print_fn)
            elif choice == "6":
                print_fn(engine.clear_draft().message)
            elif choice == "7":
                _export_flow(engine, input_fn, print_fn)
            elif choice == "8":
                _submit_flow(engine, print_fn)
            elif choice in MENU_QUIT_COMMANDS:
                return 0
            else:
                print_fn("Invalid choice.")
    finally:
        engine.close()


def _print_header(engine: SelectionEngine, print_fn: PrintFn) -> None:
    summary = engine.summary()
    print_fn("\n=== Course Registration ===")
    print_fn(
        f"Credits: {summary.total} (allowed {summary.min_credits}-{summary.max_credits}) "
        f"| {len(summary.codes)} course(s) selected"
    )
    print_fn(summary.hint)


def _course_rows(catalog: Catalog, codes: list[str], selected: set[str], print_fn: PrintFn) -> None:
    """Print an aligned course table."""
    records = [record for record in (catalog.lookup(code) for code in codes) if record is not None]
    if not records:
        print_fn("No courses match.")
        return
    code_width = max(len("Code"), max(len(record.code) for record in records))
    domain_width = max(len("Domain"), max(len(record.domain) for record in records))
    header = f"    {'Code':<{code_width}} {'Cr':>2} {'Domain':<{domain_width}} Title"
    print_fn(header)
    print_fn("-" * len(header))
    for record in records:
        marker = "[x]" if record.code in selected else "[ ]"
        print_fn(
            f"{marker} {record.code:<{code_width}} {record.credits:>2} {record.domain:<{domain_width}} {record.title}"
        )


def _browse_flow(engine: SelectionEngine, browse: BrowseState, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Set domain filter and search text, then list matching courses."""
    domains = engine.catalog.domain_list()
    print_fn("\n=== Browse ===")
    for idx, domain in enumerate(domains, start=1):
        current = " *" if domain == browse.domain else ""
        print_fn(f"{idx}) {domain}{current}")
    choice = input_fn(f"Domain [{browse.domain}]: ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(domains):
        browse.domain = domains[int(choice) - 1]
    elif choice:
        print_fn("Invalid domain; keeping current filter.")

    search = input_fn(f"Search code/title [{browse.search or 'none'}] (- to reset): ").strip()
    if search == "-":
        browse.search = ""
    elif search:
        browse.search = search

    visible = engine.catalog.filter(browse.domain, browse.search)
    label = f"{len(visible)} course(s) in {browse.domain}"
    if browse.search:
        label += f" matching '{browse.search}'"
    print_fn(label)
    _course_rows(engine.catalog, [record.code for record in visible], set(engine.selected_codes), print_fn)


def _toggle_flow(engine: SelectionEngine, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Toggle one or more course codes typed by the user."""
    raw = input_fn("Course code(s) to add/remove (b to go back): ").strip()
    if raw.lower() in MENU_BACK_COMMANDS:
        return
    for token in raw.replace(",", " ").split():
        code = token.upper()
        try:
            record = engine.catalog.require(code)
        except UnknownCourseCode as exc:
            print_fn(str(exc))
            continue
        if engine.toggle(record.code):
            print_fn(f"Added {record.code} ({record.credits} cr).")
        else:
            print_fn(f"Removed {record.code}.")


def _selection_flow(engine: SelectionEngine, print_fn: PrintFn) -> None:
    """Print selected courses in selection order."""
    summary = engine.summary()
    print_fn("\n=== Selection ===")
    if not summary.codes:
        print_fn("No courses selected.")
        return
    _course_rows(engine.catalog, list(summary.codes), set(summary.codes), print_fn)
    print_fn(f"Total: {summary.total} credit(s)")


def _load_flow(engine: SelectionEngine, print_fn: PrintFn) -> None:
    """Replace the selection with the persisted draft."""
    try:
        result = engine.load_draft()
    except MalformedDraft as exc:
        print_fn(f"Saved draft is unreadable; selection unchanged. ({exc})")
        return
    print_fn(result.message)


def _export_flow(engine: SelectionEngine, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Write the selection to a JSON file."""
    target = input_fn(f"Export path [{DEFAULT_EXPORT_NAME}]: ").strip() or DEFAULT_EXPORT_NAME
    try:
        count = engine.write_export(target)
    except OSError as exc:
        print_fn(f"Export failed: {exc}")
        return
    print_fn(f"Exported {count} course(s) to {target}")


def _submit_flow(engine: SelectionEngine, print_fn: PrintFn) -> None:
    """Submit the selection and report the outcome."""
    result = engine.submit()
    if isinstance(result, Accepted):
        when = datetime.fromtimestamp(result.submitted_at / 1000).astimezone().strftime("%Y-%m-%d %H:%M")
        print_fn(f"Submitted successfully ({result.total} credits) at {when}.")
        if not result.recorded:
            print_fn("Warning: submission record could not be stored.")
        print_fn("Your selection remains editable.")
        return
    print_fn("Cannot submit:")
    for reason in result.reasons:
        print_fn(f"- {reason[:1].upper()}{reason[1:]}.")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
