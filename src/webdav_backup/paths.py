"""Path normalization and URL construction for the backup folder.

Every relative path handed to the library is anchored under ROOT_FOLDER on
the server. Absolute http(s) URLs are the only way to address anything
outside of it and are passed through untouched.
"""

from __future__ import annotations

import logging
from urllib.parse import quote_plus

from webdav_backup.models import AbsoluteUrl, LogicalPath, RelativePath

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://dav.jianguoyun.com/dav"
ROOT_FOLDER = "Backups"

_URL_PREFIXES = ("http://", "https://")


def parse_path(path: str | LogicalPath | None) -> LogicalPath:
    """Classify a caller-supplied path as relative or absolute.

    Args:
        path: Raw string, or an already classified path which is returned as-is

    Returns:
        AbsoluteUrl for http(s) URLs, RelativePath for anything else
    """
    if isinstance(path, (RelativePath, AbsoluteUrl)):
        return path
    path = path or ""
    if path.startswith(_URL_PREFIXES):
        return AbsoluteUrl(path)
    return RelativePath(path)


def is_absolute_url(path: str | LogicalPath | None) -> bool:
    """Check if a path addresses a resource by full URL."""
    return isinstance(parse_path(path), AbsoluteUrl)


def normalize_path(path: str | LogicalPath | None) -> str:
    """Anchor a path under the root folder.

    Args:
        path: File or folder path, optionally already prefixed with the root
            folder, or an absolute URL

    Returns:
        The canonical path: the URL unchanged, or a path starting with
        ROOT_FOLDER and no leading separator
    """
    logical = parse_path(path)
    if isinstance(logical, AbsoluteUrl):
        return logical.value

    value = logical.value
    if not value:
        return ROOT_FOLDER + "/"

    if value.startswith("/"):
        value = value[1:]
    if value != ROOT_FOLDER and not value.startswith(ROOT_FOLDER + "/"):
        value = f"{ROOT_FOLDER}/{value}"
    return value


def ensure_trailing_slash(url: str | None) -> str:
    """Return the server URL with exactly one trailing separator.

    Blank URLs fall back to DEFAULT_SERVER_URL.
    """
    url = (url or "").strip() or DEFAULT_SERVER_URL
    return url.rstrip("/") + "/"


def encode_segment(segment: str) -> str:
    """Percent-encode one path segment, spaces as %20.

    Segments that cannot be encoded are returned raw.
    """
    try:
        return quote_plus(segment, safe="*").replace("+", "%20")
    except UnicodeError:
        logger.debug(f"Could not encode path segment {segment!r}; using it raw")
        return segment


def build_url(base: str | None, path: str | LogicalPath | None) -> str:
    """Build the absolute URL of a path on the server.

    Args:
        base: Server URL; blank means DEFAULT_SERVER_URL
        path: Path to resolve, normalized under the root folder first

    Returns:
        Fully percent-encoded URL. Absolute URLs are returned unchanged and
        the base is ignored.
    """
    if is_absolute_url(path):
        return parse_path(path).value

    normalized = normalize_path(path)
    parts = normalized.split("/")
    url = ensure_trailing_slash(base)
    for i, part in enumerate(parts):
        if not part:
            continue
        url += encode_segment(part)
        if i < len(parts) - 1 or normalized.endswith("/"):
            url += "/"
    return url
