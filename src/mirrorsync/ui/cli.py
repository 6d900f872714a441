# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, cast
from uuid import UUID

from dotenv import load_dotenv

from mirrorsync.app import Library
from mirrorsync.config import configure_logging
from mirrorsync.domain.errors import RejectedActionError
from mirrorsync.domain.model import MarkDirection, SortDirection, SortKey

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from mirrorsync.domain.model import DisplayPolicy
    from mirrorsync.domain.unification import ChapterView

log = logging.getLogger(__name__)

_DIRECTIONS = {"start": MarkDirection.TOWARD_START, "end": MarkDirection.TOWARD_END}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect and edit a mirrorsync library")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import or refresh a work from a listing")
    import_cmd.add_argument("path", type=Path, help="JSON listing file")

    subparsers.add_parser("works", help="List stored works")

    chapters = subparsers.add_parser("chapters", help="Show the unified chapter list of a work")
    chapters.add_argument("work_id", type=str)
    chapters.add_argument(
        "--all",
        action="store_true",
        help="Show duplicate chapters from every mirror side by side",
    )
    chapters.add_argument("--no-half", action="store_true", help="Hide half chapters")
    chapters.add_argument(
        "--sort",
        choices=[key.value for key in SortKey],
        help="Sort key (defaults to the work's policy)",
    )
    chapters.add_argument("--ascending", action="store_true", help="Sort ascending")

    for name, noun in (("mirrors", "mirror"), ("groups", "scanlator group")):
        priority = subparsers.add_parser(name, help=f"Manage {noun} priority")
        priority.add_argument("work_id", type=str)
        priority_sub = priority.add_subparsers(dest="priority_command", required=True)
        move = priority_sub.add_parser("move", help=f"Move a {noun} to another rank")
        move.add_argument("from_index", type=int)
        move.add_argument("to_index", type=int)

    mark = subparsers.add_parser("mark", help="Mark chapters read or unread")
    mark.add_argument("work_id", type=str)
    mark.add_argument("chapter_id", type=str)
    mark.add_argument("--toward", choices=sorted(_DIRECTIONS), required=True)
    mark.add_argument("--unread", action="store_true", help="Mark unread instead of read")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _load_listing(path: Path) -> dict[str, object]:
    try:
        with path.open(encoding="utf-8") as handle:
            loaded = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read listing {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ValueError(f"Listing {path} must contain a JSON object")
    return cast(dict[str, object], loaded)


def _policy_override(args: argparse.Namespace, base: DisplayPolicy) -> DisplayPolicy | None:
    if not (args.all or args.no_half or args.sort or args.ascending):
        return None
    return replace(
        base,
        show_all_duplicates=args.all or base.show_all_duplicates,
        include_half_chapters=base.include_half_chapters and not args.no_half,
        sort_key=SortKey(args.sort) if args.sort else base.sort_key,
        sort_direction=SortDirection.ASCENDING if args.ascending else base.sort_direction,
    )


def _format_chapter(index: int, view: ChapterView, *, is_next: bool) -> str:
    marker = ">" if is_next else " "
    state = "read" if view.is_read else f"{view.progress:.0%}"
    title = f" - {view.title}" if view.title else ""
    return (
        f"{marker}{index:4d}  {view.id}  Chapter {view.display_number}{title}"
        f"  [{view.attribution}]  {view.timestamp:%Y-%m-%d}  {state}"
    )


def _build_library() -> Library:
    return Library()


def _run(args: argparse.Namespace, library: Library) -> None:
    if args.command == "import":
        work = library.import_listing(_load_listing(args.path))
        print(f"{work.id}  {work.title}  ({len(work.mirrors)} mirror(s))")
    elif args.command == "works":
        for work in library.list_works():
            print(f"{work.id}  {work.title}")
    elif args.command == "chapters":
        work_id = _parse_uuid(args.work_id)
        policy = _policy_override(args, library.work(work_id).display_policy)
        sequence = library.chapters(work_id, policy)
        next_view = library.continue_reading(work_id, policy)
        for index, view in enumerate(sequence):
            is_next = next_view is not None and view.id == next_view.id
            print(_format_chapter(index, view, is_next=is_next))
    elif args.command == "mirrors":
        library.reorder_mirrors(_parse_uuid(args.work_id), args.from_index, args.to_index)
    elif args.command == "groups":
        library.reorder_groups(_parse_uuid(args.work_id), args.from_index, args.to_index)
    elif args.command == "mark":
        changed = library.mark_range(
            _parse_uuid(args.work_id),
            _parse_uuid(args.chapter_id),
            _DIRECTIONS[args.toward],
            is_read=not args.unread,
        )
        log.info("Updated %d chapter(s)", len(changed))
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        library = _build_library()
        _run(parsed_args, library)
    except RejectedActionError as exc:
        log.error("Rejected: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
