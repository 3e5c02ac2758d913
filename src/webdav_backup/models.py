"""Data models for the webdav_backup library."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RelativePath:
    """A path to be anchored under the backup root folder."""

    value: str


@dataclass(frozen=True)
class AbsoluteUrl:
    """A fully qualified URL, used as-is without root anchoring."""

    value: str


LogicalPath = Union[RelativePath, AbsoluteUrl]


@dataclass(frozen=True)
class ResourceEntry:
    """One entry of a remote directory listing."""

    name: str
    path: str
    is_directory: bool
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "isDirectory": self.is_directory,
            "size": self.size,
        }


@dataclass(frozen=True)
class Success:
    """Successful operation, with an optional payload for the caller."""

    payload: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed operation.

    code is the stable machine-readable prefix (e.g. "upload_failed"),
    message the human-readable reason.
    """

    code: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" if self.message else self.code


OperationResult = Union[Success, Failure]
