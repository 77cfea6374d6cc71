"""Content-based MIME type sniffing for served files."""

from __future__ import annotations

import logging
from pathlib import Path

import filetype

from config import CONTENT_SNIFF_BYTES, DEFAULT_CONTENT_TYPE

logger = logging.getLogger(__name__)


def sniff_bytes(header: bytes) -> str | None:
    """Return the MIME type whose magic number matches header, if any."""
    if not header:
        return None
    return filetype.guess_mime(header)


def sniff_content_type(file_path: Path, sniff_size: int = CONTENT_SNIFF_BYTES) -> str:
    try:
        with file_path.open("rb") as file_obj:
            header = file_obj.read(sniff_size)
    except OSError as exc:
        logger.debug("could not read %s for sniffing: %s", file_path, exc)
        return DEFAULT_CONTENT_TYPE
    return sniff_bytes(header) or DEFAULT_CONTENT_TYPE
