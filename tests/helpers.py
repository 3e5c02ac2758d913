"""Shared test helpers for webdav_backup tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from webdav_backup._internal.dav_client import DavClient


def multistatus(*responses: str) -> bytes:
    """Wrap <d:response> fragments into a multistatus document."""
    body = "".join(responses)
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<d:multistatus xmlns:d="DAV:">{body}</d:multistatus>'
    ).encode("utf-8")


def dav_response(href: str, *, collection: bool = False, length: int | None = None) -> str:
    """Build one <d:response> fragment with a 200 propstat."""
    resourcetype = "<d:resourcetype><d:collection/></d:resourcetype>" if collection else (
        "<d:resourcetype/>"
    )
    content_length = (
        f"<d:getcontentlength>{length}</d:getcontentlength>" if length is not None else ""
    )
    return (
        f"<d:response><d:href>{href}</d:href>"
        f"<d:propstat><d:prop>{resourcetype}{content_length}</d:prop>"
        "<d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>"
    )


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays responses."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def make_dav_client(
    responder: Callable[[httpx.Request], httpx.Response],
    username: str = "user",
    password: str = "secret",
) -> tuple[DavClient, RecordingHandler]:
    """Create a DavClient backed by a recording mock transport."""
    handler = RecordingHandler(responder)
    client = DavClient(username, password, transport=httpx.MockTransport(handler))
    return client, handler
