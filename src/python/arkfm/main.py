"""
Main entry point for arkfm: lists a directory or an archive directory.

    arkfm ~/Downloads
    arkfm ~/Downloads/backup.tar.gz:/etc --sort size --desc
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from .config import CONFIG, parse_human_size
from .core.errors import FileManagerError
from .core.models import Entry, parse_address
from .core.sorting import SortDirection, SortKey
from .services.application import ApplicationService
from .services.config_service import ConfigService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="arkfm", description="Browse directories and archives.")
    parser.add_argument("address", nargs="?", default="~",
                        help="directory, or ARCHIVE:/inner/path to look inside an archive")
    parser.add_argument("--sort", choices=[key.value for key in SortKey], default=None)
    parser.add_argument("--desc", action="store_true", help="sort descending")
    parser.add_argument("--config", default=None, help="settings file")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {CONFIG['APP_VERSION']}")
    return parser


def format_entry(entry: Entry) -> str:
    marker = "d" if entry.is_directory else "l" if entry.is_symlink else "-"
    size = "" if entry.is_directory else parse_human_size(entry.size)
    stamp = datetime.fromtimestamp(entry.modified_at).strftime("%Y-%m-%d %H:%M")
    return f"{marker} {size:>10}  {stamp}  {entry.name}"


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app_service = ApplicationService(ConfigService(args.config))
    errors: List[str] = []
    app_service.show_error.connect(lambda title, message: errors.append(message))

    try:
        tab = app_service.create_tab(parse_address(args.address))
        if args.sort or args.desc:
            key = SortKey(args.sort) if args.sort else tab.sort_policy.key
            direction = SortDirection.DESCENDING if args.desc else SortDirection.ASCENDING
            tab.sort_policy.key = key
            tab.sort_policy.direction = direction
            tab.primary_pane.resort()
    except FileManagerError as e:
        errors.append(e.message)
        tab = None
    finally:
        app_service.cleanup()

    if errors:
        for message in errors:
            print(f"arkfm: {message}", file=sys.stderr)
        return 1

    pane = tab.primary_pane
    print(str(pane.address))
    for entry in pane.entries:
        print(format_entry(entry))
    return 0


if __name__ == "__main__":
    sys.exit(main())
