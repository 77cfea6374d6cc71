"""HTML index pages for served directories."""

from __future__ import annotations

import html
import logging
import os
from pathlib import Path
from urllib.parse import quote

logger = logging.getLogger(__name__)

LISTING_HEAD = (
    "<html><head><title>Directory Listing</title></head><body>"
    "<h1>Directory Listing</h1><ul>"
)
LISTING_TAIL = "</ul></body></html>"


def entry_href(root_dir: Path, entry_path: Path) -> str:
    """Build the link target that resolves back to entry_path."""
    relative_path = entry_path.relative_to(root_dir).as_posix()
    return "/" + quote(os.fsencode(relative_path), safe="/")


def display_name(name: str) -> str:
    readable = os.fsencode(name).decode("utf-8", errors="replace")
    return html.escape(readable)


def iter_directory_entries(directory: Path) -> list[os.DirEntry[str]]:
    """Collect the immediate children of directory in enumeration order.

    Opening the directory raises OSError. A failure partway through ends the
    enumeration with whatever was read so far.
    """
    entries: list[os.DirEntry[str]] = []
    with os.scandir(directory) as iterator:
        while True:
            try:
                entry = next(iterator)
            except StopIteration:
                break
            except OSError as exc:
                logger.warning(
                    "listing of %s truncated after %d entries: %s",
                    directory,
                    len(entries),
                    exc,
                )
                break
            entries.append(entry)
    return entries


def render_directory_listing(root_dir: Path, directory: Path) -> str:
    items = [
        f'<li><a href="{entry_href(root_dir, directory / entry.name)}">'
        f"{display_name(entry.name)}</a></li>"
        for entry in iter_directory_entries(directory)
    ]
    return LISTING_HEAD + "".join(items) + LISTING_TAIL
