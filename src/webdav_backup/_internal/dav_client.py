"""httpx based WebDAV client with preemptive Basic authentication."""

from __future__ import annotations

import base64
import logging
import xml.etree.ElementTree as ET
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any
from urllib.parse import unquote, urlparse

import httpx

from webdav_backup import __version__
from webdav_backup.exceptions import TransportError
from webdav_backup.models import ResourceEntry

logger = logging.getLogger(__name__)

USER_AGENT = f"webdav-backup/{__version__}"

# Some WebDAV servers mishandle HTTP/2 negotiation on PROPFIND
HTTP_VERSIONS = {"http1": True, "http2": False}

DAV_NS = "DAV:"

PROPFIND_BODY = """<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:">
  <d:prop>
    <d:resourcetype/>
    <d:getcontentlength/>
  </d:prop>
</d:propfind>"""

# Sentinel size for entries without a content length (directories)
UNKNOWN_SIZE = -1


def basic_credential(username: str, password: str) -> str:
    """Compute the Basic Authorization header value for a user."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class PreemptiveBasicAuth(httpx.Auth):
    """Basic auth sent with the first request instead of after a 401.

    Some WebDAV servers never answer with a proper challenge, so waiting for
    one would either double the round trips or fail outright. With
    preemptive=False the credential is only attached in answer to a 401,
    and only once: a request that already carried an Authorization header is
    never retried.
    """

    def __init__(self, username: str, password: str, *, preemptive: bool = True) -> None:
        self._credential = basic_credential(username, password)
        self._preemptive = preemptive

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._preemptive:
            request.headers["Authorization"] = self._credential
        response = yield request

        if response.status_code != 401 or "Authorization" in request.headers:
            return
        request.headers["Authorization"] = self._credential
        yield request


class DavClient:
    """Minimal WebDAV client bound to a single set of credentials.

    Each instance owns its own httpx.Client; nothing is shared between
    instances.
    """

    def __init__(
        self,
        username: str,
        password: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            auth=PreemptiveBasicAuth(username, password),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
            **HTTP_VERSIONS,
        )

    def __enter__(self) -> DavClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        _raise_for_status(method, url, response)
        return response

    def put(self, url: str, data: bytes) -> None:
        """Upload bytes to a URL, replacing any existing resource."""
        self._request("PUT", url, content=data)

    @contextmanager
    def get(self, url: str) -> Iterator[httpx.Response]:
        """Open a streaming GET of a URL.

        The response is closed when the context exits, whatever the outcome
        of reading it.
        """
        try:
            with self._client.stream("GET", url) as response:
                _raise_for_status("GET", url, response)
                yield response
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed: {e}") from e

    def list(self, url: str) -> list[ResourceEntry]:
        """List a collection and its direct children, in server order."""
        response = self._request(
            "PROPFIND",
            url,
            content=PROPFIND_BODY,
            headers={"Depth": "1", "Content-Type": "application/xml; charset=utf-8"},
        )
        return parse_multistatus(response.content)

    def exists(self, url: str) -> bool:
        """Check if a resource exists; a 404 is False, not an error."""
        try:
            response = self._client.head(url)
        except httpx.HTTPError as e:
            raise TransportError(f"HEAD {url} failed: {e}") from e
        if response.status_code == 404:
            return False
        _raise_for_status("HEAD", url, response)
        return True

    def delete(self, url: str) -> None:
        """Delete a resource."""
        self._request("DELETE", url)

    def create_directory(self, url: str) -> None:
        """Create a collection (MKCOL)."""
        self._request("MKCOL", url)


def build_transport(
    username: str,
    password: str,
    *,
    transport: httpx.BaseTransport | None = None,
) -> DavClient:
    """Create a fresh DavClient for one call."""
    return DavClient(username, password, transport=transport)


def _raise_for_status(method: str, url: str, response: httpx.Response) -> None:
    if response.is_success:
        return
    raise TransportError(
        f"{method} {url} failed: {response.status_code} {response.reason_phrase}".rstrip(),
        status_code=response.status_code,
    )


def _dav(tag: str) -> str:
    return f"{{{DAV_NS}}}{tag}"


def parse_multistatus(content: bytes) -> list[ResourceEntry]:
    """Parse a PROPFIND multistatus body into ResourceEntry rows.

    Raises:
        TransportError: If the body is not valid XML
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise TransportError(f"Invalid PROPFIND response: {e}") from e

    entries: list[ResourceEntry] = []
    for response_el in root.findall(_dav("response")):
        href_el = response_el.find(_dav("href"))
        if href_el is None or not href_el.text:
            continue
        path = unquote(urlparse(href_el.text.strip()).path)

        is_directory = False
        size = UNKNOWN_SIZE
        for propstat in response_el.findall(_dav("propstat")):
            status_el = propstat.find(_dav("status"))
            if status_el is not None and "200" not in (status_el.text or ""):
                continue
            prop = propstat.find(_dav("prop"))
            if prop is None:
                continue
            resourcetype = prop.find(_dav("resourcetype"))
            if resourcetype is not None and resourcetype.find(_dav("collection")) is not None:
                is_directory = True
            length = prop.find(_dav("getcontentlength"))
            if length is not None and length.text:
                try:
                    size = int(length.text.strip())
                except ValueError:
                    logger.debug(f"Ignoring non-numeric content length for {path}")

        entries.append(
            ResourceEntry(
                name=path.rstrip("/").rsplit("/", 1)[-1],
                path=path,
                is_directory=is_directory,
                size=size,
            )
        )
    return entries
