"""Backup operations against a WebDAV server.

Each operation builds its own transport, works under the backup root folder
and returns a Success or Failure instead of raising.
"""

from __future__ import annotations

import base64
import binascii
import logging

from webdav_backup._internal.dav_client import DavClient, build_transport
from webdav_backup.exceptions import EncodingError, MissingParametersError, TransportError
from webdav_backup.models import (
    AbsoluteUrl,
    Failure,
    LogicalPath,
    OperationResult,
    RelativePath,
    Success,
)
from webdav_backup.paths import DEFAULT_SERVER_URL, build_url, is_absolute_url, normalize_path

logger = logging.getLogger(__name__)

# MKCOL answers meaning the collection is already there
DIRECTORY_EXISTS_CODES = frozenset({405, 409})


def ensure_directories(transport: DavClient, base: str | None, path: str) -> None:
    """Create every ancestor directory of a canonical path, shallowest first.

    The last segment is a file unless the path ends with a separator, in
    which case it is created too. Failures are logged and ignored: the write
    that follows reports the real error if a directory is still missing.

    Args:
        transport: Client to issue MKCOL requests with
        base: Server URL
        path: Canonical path as returned by normalize_path
    """
    if is_absolute_url(path):
        return

    parts = path.split("/")
    depth = len(parts) if path.endswith("/") else len(parts) - 1
    current = ""
    for part in parts[:depth]:
        if not part:
            continue
        current = f"{current}/{part}" if current else part
        dir_url = build_url(base, current + "/")
        logger.debug(f"Ensuring directory: {dir_url}")
        try:
            transport.create_directory(dir_url)
        except TransportError as e:
            if e.status_code in DIRECTORY_EXISTS_CODES:
                continue
            logger.debug(f"Could not create {dir_url}: {e}")


def decode_payload(payload: str) -> bytes:
    """Decode a base64 payload, dropping any data URI prefix.

    Raises:
        EncodingError: If the payload is not valid base64
    """
    if "," in payload:
        payload = payload.split(",", 1)[1]
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 payload: {e}") from e


def encode_payload(data: bytes) -> str:
    """Encode bytes as unwrapped base64 text."""
    try:
        return base64.b64encode(data).decode("ascii")
    except (TypeError, UnicodeDecodeError) as e:
        raise EncodingError(f"Cannot encode downloaded content: {e}") from e


def _require(**params: str | LogicalPath | None) -> None:
    missing = []
    for name, value in params.items():
        if isinstance(value, (RelativePath, AbsoluteUrl)):
            value = value.value
        if not value:
            missing.append(name)
    if missing:
        raise MissingParametersError(missing)


def upload(
    server_url: str | None,
    username: str,
    password: str,
    filename: str | LogicalPath,
    payload: str,
) -> OperationResult:
    """Upload base64 content to a file under the backup folder.

    Missing parent directories are created first.

    Args:
        server_url: Server URL (default server when empty)
        username: Account user name
        password: Account password
        filename: Target path, relative to the backup folder, or absolute URL
        payload: File content as base64, optionally as a data URI

    Returns:
        Success without payload, or Failure "missing_parameters" /
        "upload_failed"
    """
    try:
        _require(username=username, password=password, filename=filename, payload=payload)
    except MissingParametersError as e:
        logger.error(f"Upload rejected: {e}")
        return Failure("missing_parameters")

    server_url = server_url or DEFAULT_SERVER_URL
    try:
        data = decode_payload(payload)
        with build_transport(username, password) as transport:
            path = normalize_path(filename)
            ensure_directories(transport, server_url, path)
            url = build_url(server_url, path)
            logger.info(f"Uploading {len(data)} bytes to {url}")
            transport.put(url, data)
        return Success()
    except Exception as e:
        logger.error(f"Upload failed: {e}")
        return Failure("upload_failed", str(e))


def download(
    server_url: str | None,
    username: str,
    password: str,
    filename: str | LogicalPath,
) -> OperationResult:
    """Download a file and return its content as base64.

    Returns:
        Success with {"base64": ...}, or Failure "download_failed"
    """
    server_url = server_url or DEFAULT_SERVER_URL
    try:
        with build_transport(username, password) as transport:
            url = build_url(server_url, normalize_path(filename))
            logger.info(f"Downloading from {url}")
            with transport.get(url) as response:
                data = b"".join(response.iter_bytes())
                encoded = encode_payload(data)
        return Success({"base64": encoded})
    except Exception as e:
        logger.error(f"Download failed: {e}")
        return Failure("download_failed", str(e))


def list_resources(
    server_url: str | None,
    username: str,
    password: str,
    path: str | LogicalPath = "",
) -> OperationResult:
    """List a folder, by default the backup folder itself.

    Entries are returned in server order, the folder itself included when
    the server reports it.

    Returns:
        Success with {"items": [...]}, or Failure "list_failed"
    """
    server_url = server_url or DEFAULT_SERVER_URL
    try:
        with build_transport(username, password) as transport:
            normalized = normalize_path(path)
            if not normalized.endswith("/"):
                normalized += "/"
            url = build_url(server_url, normalized)
            logger.info(f"Listing {url}")
            entries = transport.list(url)
        return Success({"items": [entry.to_dict() for entry in entries]})
    except Exception as e:
        logger.error(f"List failed: {e}")
        return Failure("list_failed", str(e))


def exists(
    server_url: str | None,
    username: str,
    password: str,
    filename: str | LogicalPath,
) -> OperationResult:
    """Check if a file exists.

    Returns:
        Success with {"exists": bool}, or Failure "exists_failed"
    """
    server_url = server_url or DEFAULT_SERVER_URL
    try:
        with build_transport(username, password) as transport:
            url = build_url(server_url, normalize_path(filename))
            found = transport.exists(url)
        return Success({"exists": found})
    except Exception as e:
        logger.error(f"Exists check failed: {e}")
        return Failure("exists_failed", str(e))


def delete(
    server_url: str | None,
    username: str,
    password: str,
    filename: str | LogicalPath,
) -> OperationResult:
    """Delete a file.

    Returns:
        Success without payload, or Failure "delete_failed"
    """
    server_url = server_url or DEFAULT_SERVER_URL
    try:
        with build_transport(username, password) as transport:
            url = build_url(server_url, normalize_path(filename))
            logger.info(f"Deleting {url}")
            transport.delete(url)
        return Success()
    except Exception as e:
        logger.error(f"Delete failed: {e}")
        return Failure("delete_failed", str(e))
