"""Exception hierarchy for the webdav_backup library."""

from __future__ import annotations


class WebdavBackupError(Exception):
    """Base exception for all webdav_backup errors."""

    pass


class MissingParametersError(WebdavBackupError):
    """Raised when a required call parameter is empty."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required parameters: {', '.join(missing)}")
        self.missing = missing


class TransportError(WebdavBackupError):
    """Raised when a WebDAV request fails.

    The status_code attribute holds the HTTP status of the failed response,
    or None when the request never got one (connection refused, TLS error).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EncodingError(WebdavBackupError):
    """Raised when a payload cannot be decoded from or encoded to base64."""

    pass
