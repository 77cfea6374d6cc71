"""Map request targets onto paths inside the served root directory."""

import logging
import os
from pathlib import Path
from urllib.parse import unquote_to_bytes

logger = logging.getLogger(__name__)


def decode_target(target: str) -> str:
    """Percent-decode a request target into a path relative to the root."""
    raw_path = target.split("?", 1)[0]
    decoded = os.fsdecode(unquote_to_bytes(raw_path))
    return decoded.lstrip("/")


def resolve_request_path(root_dir: Path, target: str) -> Path | None:
    """Resolve a target to a canonical path at or below root_dir, or None.

    root_dir must already be canonical. Leading separators in the decoded
    target never replace the root, and ``..`` segments are only caught by the
    containment check after canonicalization.
    """
    relative_path = decode_target(target)
    candidate = root_dir / relative_path if relative_path else root_dir

    try:
        resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as exc:
        logger.debug("target=%r did not resolve: %s", target, exc)
        return None

    try:
        resolved.relative_to(root_dir)
    except ValueError:
        logger.debug("target=%r escapes root %s", target, root_dir)
        return None

    return resolved
