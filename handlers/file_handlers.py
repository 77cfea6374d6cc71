"""Handlers that turn a request target into a file or listing response."""

import logging
from pathlib import Path

from config import LISTING_CONTENT_TYPE
from content_classifier import sniff_content_type
from directory_listing import render_directory_listing
from path_resolver import resolve_request_path
from request import HTTPRequest
from response import HTTPResponse, internal_error, not_found

logger = logging.getLogger(__name__)


def serve_directory(root_dir: Path, directory: Path) -> HTTPResponse:
    try:
        listing = render_directory_listing(root_dir, directory)
    except OSError:
        logger.exception("Failed to list directory %s", directory)
        return internal_error()
    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": LISTING_CONTENT_TYPE},
        body=listing,
    )


def serve_file(file_path: Path) -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": sniff_content_type(file_path)},
        file_path=file_path,
    )


def serve_path(request: HTTPRequest, root_dir: Path) -> HTTPResponse:
    """Resolve the request target under root_dir and build its response."""
    resolved = resolve_request_path(root_dir, request.target)
    if resolved is None:
        return not_found()

    if resolved.is_dir():
        return serve_directory(root_dir, resolved)
    if resolved.is_file():
        return serve_file(resolved)

    # Sockets, FIFOs and device nodes are never served.
    return not_found()
