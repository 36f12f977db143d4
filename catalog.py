#!/usr/bin/env python3
"""
photo-gallery: keep a catalogue of photo metadata (name, type, folder,
date/time, favourite flag) in flat text files, with hidden photos and
named collages.

Usage:
    python catalog.py add Sunset jpg 2024/holiday
    python catalog.py --data-dir ~/Gallery list
    python catalog.py import ~/Pictures/2024
"""

import argparse
import getpass
import os
import sys
from pathlib import Path
from typing import List, Optional

from errors import GalleryError
from gallery import Gallery
from logging_setup import init_logging
from models import SORT_KEYS, ImportSummary, Outcome, PhotoRecord

DATA_DIR_ENV = "GALLERY_DATA_DIR"
PASSWORD_ENV = "GALLERY_PASSWORD"


# ── Output ────────────────────────────────────────────────────────────────────

def format_record(record: PhotoRecord) -> str:
    rule = "-" * 50
    return "\n".join([
        rule,
        f" ID       : {record.id}",
        f" Name     : {record.name}",
        f" Type     : {record.type}",
        f" Folder   : {record.folder}",
        f" DateTime : {record.date_time}",
        f" Favourite: {'Yes' if record.is_favourite else 'No'}",
        rule,
    ])


def print_outcome(outcome: Outcome, show_records: bool = False, prefix: str = "") -> int:
    if show_records:
        for record in outcome.records:
            if prefix:
                print(prefix)
            print(format_record(record))
    if outcome.ok:
        print(outcome.message)
        return 0
    print(f"Error: {outcome.message}", file=sys.stderr)
    return 1


def print_import_summary(summary: ImportSummary) -> None:
    print("\n" + "=" * 44)
    print("  Photo Import Summary")
    print("=" * 44)
    print(f"\nSource: {summary.source_path}")
    print(f"  Scanned : {summary.files_scanned:>6,} files")
    print(f"  Added   : {summary.files_added:>6,} files")
    print(f"  Skipped : {summary.files_skipped:>6,} files (already in gallery)")
    print(f"  Errors  : {summary.files_errored:>6,} files")
    show = summary.errors[:20]
    for path, msg in show:
        print(f"    ! {path}: {msg}")
    if len(summary.errors) > 20:
        print(f"    ... and {len(summary.errors) - 20} more errors")
    print()


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog.py",
        description=(
            "Manage a photo metadata catalogue stored as text files: add, "
            "edit, favourite, hide, search, sort and delete photos, and "
            "record named collages."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python catalog.py add Sunset jpg 2024/holiday\n"
            "  python catalog.py sort name --desc\n"
            "  python catalog.py collage 'Summer' Sunset Beach\n"
            f"  {PASSWORD_ENV}=secret python catalog.py hidden\n"
        ),
    )
    parser.add_argument(
        "--data-dir",
        metavar="PATH",
        default=os.environ.get(DATA_DIR_ENV, "."),
        help=f"Directory holding the gallery files (default: ${DATA_DIR_ENV} or the current directory).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every operation to stderr.",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        default=None,
        help="Also write logs to a rotating file.",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars (useful when piping output to log files).",
    )

    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    p = sub.add_parser("add", help="Add a photo.")
    p.add_argument("name")
    p.add_argument("type", metavar="TYPE", help="jpg or png")
    p.add_argument("folder")

    p = sub.add_parser("delete", help="Delete a photo by id or name.")
    target = p.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", type=int, dest="record_id")
    target.add_argument("--name")

    sub.add_parser("list", help="List all photos except hidden ones.")
    sub.add_parser("favourites", help="List favourite photos except hidden ones.")

    p = sub.add_parser("favourite", help="Mark or unmark a photo as favourite.")
    p.add_argument("record_id", type=int, metavar="ID")
    state = p.add_mutually_exclusive_group()
    state.add_argument("--on", dest="favourite", action="store_true", default=True,
                       help="Mark as favourite (default).")
    state.add_argument("--off", dest="favourite", action="store_false",
                       help="Unmark as favourite.")

    p = sub.add_parser("search", help="Search visible photos by name or folder.")
    p.add_argument("query")

    p = sub.add_parser("sort", help="Sort the catalogue.")
    p.add_argument("key", choices=SORT_KEYS)
    p.add_argument("--desc", action="store_true", help="Descending order.")

    p = sub.add_parser("edit", help="Edit title, date or type of a photo.")
    p.add_argument("title")
    p.add_argument("--title", dest="new_title", default="")
    p.add_argument("--date", dest="new_date", default="", metavar="'YYYY-MM-DD HH:MM:SS'")
    p.add_argument("--type", dest="new_type", default="")

    p = sub.add_parser("move", help="Change the folder and/or type of a photo.")
    p.add_argument("record_id", type=int, metavar="ID")
    p.add_argument("--folder", default="")
    p.add_argument("--type", dest="new_type", default="")

    p = sub.add_parser("hide", help="Hide a photo from listings.")
    p.add_argument("title")

    p = sub.add_parser("unhide", help="Make a hidden photo visible again.")
    p.add_argument("title")

    sub.add_parser("hidden", help=f"List hidden photos (password from ${PASSWORD_ENV}).")

    p = sub.add_parser("collage", help="Record a collage of existing photos.")
    p.add_argument("title")
    p.add_argument("photos", nargs="+", metavar="PHOTO")

    p = sub.add_parser("import", help="Register jpg/png files found under a directory.")
    p.add_argument("source", metavar="PATH")

    return parser


def run_command(args: argparse.Namespace, gallery: Gallery) -> int:
    cmd = args.command
    if cmd == "add":
        return print_outcome(gallery.add_photo(args.name, args.type, args.folder), show_records=True)
    if cmd == "delete":
        if args.record_id is not None:
            return print_outcome(gallery.delete_by_id(args.record_id))
        return print_outcome(gallery.delete_by_name(args.name))
    if cmd == "list":
        return print_outcome(gallery.list_visible(), show_records=True)
    if cmd == "favourites":
        return print_outcome(gallery.list_favourites(), show_records=True)
    if cmd == "favourite":
        return print_outcome(gallery.set_favourite(args.record_id, args.favourite))
    if cmd == "search":
        return print_outcome(gallery.search(args.query), show_records=True)
    if cmd == "sort":
        return print_outcome(gallery.sort(args.key, descending=args.desc))
    if cmd == "edit":
        return print_outcome(
            gallery.edit_photo(args.title, args.new_title, args.new_date, args.new_type),
            show_records=True,
        )
    if cmd == "move":
        return print_outcome(
            gallery.change_folder_or_type(args.record_id, args.folder, args.new_type),
            show_records=True,
        )
    if cmd == "hide":
        return print_outcome(gallery.hide(args.title))
    if cmd == "unhide":
        return print_outcome(gallery.unhide(args.title))
    if cmd == "hidden":
        reference = os.environ.get(PASSWORD_ENV)
        if not reference:
            print(f"Error: set {PASSWORD_ENV} to view hidden photos.", file=sys.stderr)
            return 1
        supplied = getpass.getpass("Enter your password to view hidden photos: ")
        return print_outcome(
            gallery.view_hidden(supplied, reference), show_records=True, prefix="(HIDDEN)"
        )
    if cmd == "collage":
        return print_outcome(gallery.create_collage(args.title, args.photos))
    if cmd == "import":
        outcome = gallery.import_directory(
            Path(args.source).expanduser().resolve(), use_progress=not args.no_progress
        )
        if outcome.summary is not None:
            print_import_summary(outcome.summary)
        status = print_outcome(outcome)
        if outcome.summary is not None and outcome.summary.files_errored:
            return 1
        return status
    raise ValueError(f"Unknown command: {cmd}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(verbose=args.verbose, log_file=args.log_file)

    data_dir = Path(args.data_dir).expanduser().resolve()
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        gallery = Gallery.open(data_dir)
        return run_command(args, gallery)
    except GalleryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: cannot use data directory {data_dir}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
