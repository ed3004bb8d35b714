"""Pydantic models and enums shared across chainhttp modules.

**Enums** -- :class:`HTTPMethod`, :class:`HttpVersion`,
:class:`RedirectPolicy` and :class:`CallState`.

**Configuration model** -- :class:`ClientSettings`, the transport settings
resolved by :func:`~chainhttp.config.resolve_settings`.

**Transport output model** -- :class:`RawResponse`, the uninterpreted
response handed from the transport to the response wrapper.

All models are frozen: once built they are shared read-only between
concurrent calls.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HTTPMethod(str, enum.Enum):
    """HTTP methods the request builder can set."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def has_body(self) -> bool:
        """Whether requests with this method carry a serialised body."""
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


class HttpVersion(str, enum.Enum):
    """Preferred HTTP protocol version, passed through to the transport."""

    HTTP_1_1 = "HTTP/1.1"
    HTTP_2 = "HTTP/2"


class RedirectPolicy(str, enum.Enum):
    """Redirect handling requested from the transport.

    ``NORMAL`` follows redirects like ``ALWAYS``; the httpx transport has no
    separate downgrade-protected mode.
    """

    NEVER = "never"
    ALWAYS = "always"
    NORMAL = "normal"

    @property
    def follows(self) -> bool:
        return self is not RedirectPolicy.NEVER


class CallState(str, enum.Enum):
    """Lifecycle of a single :class:`~chainhttp.client.call.HttpCall`."""

    BUILT = "built"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"


class ClientSettings(BaseModel):
    """Transport settings shared by every call of a client.

    Per-request values on a :class:`~chainhttp.request.RequestDescriptor`
    (timeout, version, redirect policy) take precedence over these.

    Example::

        ClientSettings(
            base_url="https://jsonplaceholder.typicode.com",
            version=HttpVersion.HTTP_2,
            follow_redirects=RedirectPolicy.ALWAYS,
        )
    """

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = Field(
        default=None, description="Prefix for relative request URIs"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    version: HttpVersion = Field(default=HttpVersion.HTTP_1_1)
    follow_redirects: RedirectPolicy = Field(default=RedirectPolicy.NEVER)
    default_headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )


class RawResponse(BaseModel):
    """An uninterpreted HTTP response as produced by a transport."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    method: str = ""
    url: str = ""

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of header *name*, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
