"""Default transport backed by :class:`httpx.AsyncClient`.

Connection handling:

- Outside an ``async with`` block each :meth:`HttpxTransport.send` opens a
  short-lived :class:`httpx.AsyncClient`, so the request's own protocol
  version can be honoured.
- Inside ``async with transport:`` one client is shared by every send; it
  uses the version from :class:`~chainhttp.models.ClientSettings`.
- A caller-supplied :class:`httpx.AsyncClient` is always used as-is and is
  never closed by the transport.

The transport never retries.  httpx request errors (connect errors,
timeouts, protocol errors, redirect loops, undecodable bodies) are re-raised as
:class:`~chainhttp.exceptions.TransportError`.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from chainhttp.exceptions import TransportError
from chainhttp.models import ClientSettings, HttpVersion, RawResponse
from chainhttp.output import get_output
from chainhttp.request import RequestDescriptor, merge_headers
from chainhttp.transport.base import Transport


class HttpxTransport(Transport):
    """Send requests with :mod:`httpx`.

    Args:
        settings: Base URL, timeout, SSL verification, protocol version,
            redirect policy and default headers.  Per-request values on the
            descriptor take precedence.
        client: Optional externally managed :class:`httpx.AsyncClient`.
        transport: Optional httpx transport (e.g. :class:`httpx.MockTransport`)
            for the clients this transport opens itself.

    Example::

        async with HttpxTransport(ClientSettings(base_url="https://api.example.com")) as t:
            raw = await t.send(new_builder().uri("/todos/1").get().build())
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._client = client
        self._transport = transport
        self._owns_client = False

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        if self._client is None:
            self._client = self._open_client(self._settings.version)
            self._owns_client = True
        return self

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    async def send(self, request: RequestDescriptor) -> RawResponse:
        output = get_output()
        method = request.method.value
        output.debug(f"-> {method} {request.uri}")

        try:
            if self._client is not None:
                response = await self._send_with(self._client, request)
            else:
                version = request.version or self._settings.version
                async with self._open_client(version) as client:
                    response = await self._send_with(client, request)
        except httpx.RequestError as exc:
            output.debug(f"x  {method} {request.uri}: {exc!r}")
            raise TransportError(f"{method} {request.uri} failed: {exc}", cause=exc) from exc

        output.debug(f"<- {response.status_code} {method} {response.url}")
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
            method=method,
            url=str(response.url),
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _open_client(self, version: HttpVersion) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "base_url": self._settings.base_url or "",
            "timeout": self._settings.timeout,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["verify"] = self._settings.verify_ssl
            kwargs["http2"] = version is HttpVersion.HTTP_2
        return httpx.AsyncClient(**kwargs)

    async def _send_with(self, client: httpx.AsyncClient, request: RequestDescriptor) -> httpx.Response:
        policy = request.follow_redirects or self._settings.follow_redirects
        timeout = request.timeout if request.timeout is not None else self._settings.timeout
        http_request = client.build_request(
            request.method.value,
            request.uri,
            headers=merge_headers(self._settings.default_headers, request.headers),
            content=request.body,
            timeout=timeout,
        )
        return await client.send(http_request, follow_redirects=policy.follows)
