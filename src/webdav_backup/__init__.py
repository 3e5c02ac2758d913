"""WebDAV Backup - A Python library for syncing backup files over WebDAV.

All relative paths live under a fixed backup folder on the server. Every
operation returns a Success or Failure value instead of raising.

Example usage:
    from webdav_backup import download, upload

    result = upload(
        "https://dav.example.com/dav", "user", "password",
        "2024/backup.zip", "UEsDBBQAAAAIAA==",
    )
    if not result.ok:
        print(result)

    result = download("https://dav.example.com/dav", "user", "password", "2024/backup.zip")
    content = result.payload["base64"]

    # From async code, without blocking the event loop
    from webdav_backup import WebdavBridge

    result = await WebdavBridge().call("list", {"username": "user", "password": "pw"})
"""

# Set before the submodule imports: the transport reads it for its User-Agent
__version__ = "0.1.0"

from webdav_backup.bridge import WebdavBridge
from webdav_backup.client import (
    delete,
    download,
    ensure_directories,
    exists,
    list_resources,
    upload,
)
from webdav_backup.exceptions import (
    EncodingError,
    MissingParametersError,
    TransportError,
    WebdavBackupError,
)
from webdav_backup.models import (
    AbsoluteUrl,
    Failure,
    RelativePath,
    ResourceEntry,
    Success,
)
from webdav_backup.paths import DEFAULT_SERVER_URL, ROOT_FOLDER, build_url, normalize_path

__all__ = [
    # Operations
    "upload",
    "download",
    "list_resources",
    "exists",
    "delete",
    "WebdavBridge",
    # Paths
    "DEFAULT_SERVER_URL",
    "ROOT_FOLDER",
    "normalize_path",
    "build_url",
    "ensure_directories",
    # Models
    "AbsoluteUrl",
    "RelativePath",
    "ResourceEntry",
    "Success",
    "Failure",
    # Exceptions
    "WebdavBackupError",
    "MissingParametersError",
    "TransportError",
    "EncodingError",
]
