"""Pytest fixtures for webdav_backup tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from webdav_backup.exceptions import TransportError


@pytest.fixture
def mock_transport() -> MagicMock:
    """Create a mock DavClient."""
    transport = MagicMock()
    transport.__enter__.return_value = transport
    transport.exists.return_value = True
    transport.list.return_value = []
    return transport


@pytest.fixture
def patch_build_transport(mock_transport: MagicMock) -> Any:
    """Patch the transport factory used by the operations."""
    with patch("webdav_backup.client.build_transport") as mock_factory:
        mock_factory.return_value = mock_transport
        yield mock_factory


@pytest.fixture
def already_exists_error() -> TransportError:
    """MKCOL failure for an existing collection."""
    return TransportError("MKCOL failed: 405 Method Not Allowed", status_code=405)
