"""Send-ready requests returned by the client's verb shortcuts.

A :class:`PendingRequest` pairs a client with a
:class:`~chainhttp.request.RequestBuilder` that has already been derived
from the client's base template.  Nothing is sent until one of the dispatch
methods is called, so per-call overrides can still be applied::

    todo = await client.get("/todos/1").header("X-Trace", "1").body_async(Todo)

Dispatch methods build the descriptor synchronously, so an incomplete
request raises :class:`~chainhttp.exceptions.ConfigurationError` at the
call site, and return an awaitable for the network part.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union, overload

from chainhttp.client.call import HttpCall
from chainhttp.client.response import ResponseWrapper
from chainhttp.models import HttpVersion, RawResponse, RedirectPolicy
from chainhttp.request import RequestBuilder, RequestDescriptor

if TYPE_CHECKING:
    from chainhttp.client.facade import HttpClient

T = TypeVar("T")


class PendingRequest:
    """A request bound to a client, not yet sent.

    Override methods return a new :class:`PendingRequest`; the original is
    left untouched and can be dispatched independently.
    """

    __slots__ = ("_client", "_builder")

    def __init__(self, client: HttpClient, builder: RequestBuilder) -> None:
        self._client = client
        self._builder = builder

    def __repr__(self) -> str:
        options = self._builder.options
        method = options.method.value if options.method else "?"
        return f"<PendingRequest {method} {options.uri}>"

    @property
    def builder(self) -> RequestBuilder:
        return self._builder

    # ------------------------------------------------------------------ #
    # Per-call overrides
    # ------------------------------------------------------------------ #

    def with_builder(self, fn: Callable[[RequestBuilder], RequestBuilder]) -> PendingRequest:
        """Return a pending request whose builder is ``fn(self.builder)``."""
        return PendingRequest(self._client, fn(self._builder))

    def header(self, name: str, value: str) -> PendingRequest:
        return PendingRequest(self._client, self._builder.header(name, value))

    def headers(self, headers: Mapping[str, str]) -> PendingRequest:
        return PendingRequest(self._client, self._builder.headers(headers))

    def timeout(self, timeout: Union[float, timedelta]) -> PendingRequest:
        return PendingRequest(self._client, self._builder.timeout(timeout))

    def version(self, version: HttpVersion) -> PendingRequest:
        return PendingRequest(self._client, self._builder.version(version))

    def follow_redirects(self, policy: RedirectPolicy) -> PendingRequest:
        return PendingRequest(self._client, self._builder.follow_redirects(policy))

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def build(self) -> RequestDescriptor:
        """Build the descriptor.  Raises ``ConfigurationError`` if incomplete."""
        return self._builder.build()

    def call(self, target: Any = Any) -> HttpCall[Any]:
        """Return an unsent :class:`~chainhttp.client.call.HttpCall` for *target*."""
        return self._client.new_call(self.build(), target)

    @overload
    def send_async(self) -> Awaitable[RawResponse]: ...

    @overload
    def send_async(self, target: type[T]) -> Awaitable[ResponseWrapper[T]]: ...

    def send_async(self, target: Optional[Any] = None) -> Awaitable[Any]:
        """Send the request.

        Args:
            target: Entity type for the response wrapper.  When omitted the
                awaitable resolves to the :class:`~chainhttp.models.RawResponse`.

        Returns:
            An awaitable resolving to a
            :class:`~chainhttp.client.response.ResponseWrapper` (or the raw
            response).  It raises ``TransportError`` if the transport fails.
        """
        request = self.build()
        if target is None:
            return self._client.dispatch(request)
        return self._client.new_call(request, target).send()

    def body_async(self, target: type[T]) -> Awaitable[T]:
        """Send the request and interpret the body as one ``T``."""
        return _send_as_object(self._client.new_call(self.build(), target))

    def body_list_async(self, target: type[T]) -> Awaitable[list[T]]:
        """Send the request and interpret the body as a ``list[T]``."""
        return _send_as_list(self._client.new_call(self.build(), target))


async def _send_as_object(call: HttpCall[T]) -> T:
    response = await call.send()
    return response.as_object()


async def _send_as_list(call: HttpCall[T]) -> list[T]:
    response = await call.send()
    return response.as_list()
