"""Async host bridge dispatching backup operations to worker threads."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from webdav_backup import client
from webdav_backup.models import Failure, OperationResult
from webdav_backup.paths import DEFAULT_SERVER_URL

logger = logging.getLogger(__name__)


class WebdavBridge:
    """Runs backup operations off the caller's event loop.

    Every call is independent: a fresh transport per call, no shared state,
    no ordering between concurrent calls.

    Example:
        bridge = WebdavBridge()
        result = await bridge.call("exists", {"username": "me", "password": "pw",
                                              "filename": "data.zip"})
    """

    METHODS = ("upload", "download", "list", "exists", "delete")

    async def upload(
        self, server_url: str, username: str, password: str, filename: str, payload: str
    ) -> OperationResult:
        return await asyncio.to_thread(
            client.upload, server_url, username, password, filename, payload
        )

    async def download(
        self, server_url: str, username: str, password: str, filename: str
    ) -> OperationResult:
        return await asyncio.to_thread(client.download, server_url, username, password, filename)

    async def list(
        self, server_url: str, username: str, password: str, path: str = ""
    ) -> OperationResult:
        return await asyncio.to_thread(client.list_resources, server_url, username, password, path)

    async def exists(
        self, server_url: str, username: str, password: str, filename: str
    ) -> OperationResult:
        return await asyncio.to_thread(client.exists, server_url, username, password, filename)

    async def delete(
        self, server_url: str, username: str, password: str, filename: str
    ) -> OperationResult:
        return await asyncio.to_thread(client.delete, server_url, username, password, filename)

    async def call(self, method: str, params: Mapping[str, str]) -> OperationResult:
        """Dispatch an operation by name with wire-style parameters.

        Args:
            method: One of METHODS
            params: serverUrl, username, password, filename, path, base64;
                absent keys take their defaults

        Returns:
            The operation result, or Failure "unknown_method"
        """
        if method not in self.METHODS:
            logger.error(f"Unknown bridge method: {method}")
            return Failure("unknown_method", method)

        server_url = params.get("serverUrl", DEFAULT_SERVER_URL)
        username = params.get("username", "")
        password = params.get("password", "")

        if method == "upload":
            return await self.upload(
                server_url, username, password, params.get("filename", ""), params.get("base64", "")
            )
        if method == "list":
            return await self.list(server_url, username, password, params.get("path", ""))
        operation = getattr(self, method)
        return await operation(server_url, username, password, params.get("filename", ""))
