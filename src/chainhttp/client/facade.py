"""The client facade and its builder.

:class:`HttpClient` binds three collaborators:

- a base request template (:class:`~chainhttp.request.RequestOptions`),
  possibly empty, that every call is derived from;
- a :class:`~chainhttp.transport.base.Transport` that performs the I/O;
- a :class:`~chainhttp.parser.base.Parser` that serialises request bodies
  and interprets response bodies.

All three are fixed at construction.  Verb shortcuts derive a fresh
request from the template by copy-and-override and never modify it, so a
single client can serve any number of concurrent calls.

Example::

    client = (
        builder()
        .set_base_request(new_builder().uri(TODO_URL).get().version(HttpVersion.HTTP_2))
        .set_client(ClientSettings(follow_redirects=RedirectPolicy.ALWAYS))
        .set_parser(JsonParser())
        .get_client()
    )
    todo = (await client.send_async(Todo)).as_object()
"""

from __future__ import annotations

from typing import Any, Awaitable, Optional, TypeVar, Union, overload

from chainhttp.client.call import HttpCall
from chainhttp.client.pending import PendingRequest
from chainhttp.client.response import ResponseWrapper
from chainhttp.config import resolve_settings
from chainhttp.exceptions import ConfigurationError
from chainhttp.models import ClientSettings, HTTPMethod, RawResponse
from chainhttp.parser import Parser, create_default_parser
from chainhttp.request import RequestBuilder, RequestDescriptor, RequestOptions
from chainhttp.transport import HttpxTransport, Transport

T = TypeVar("T")

BaseRequest = Union[RequestBuilder, RequestDescriptor, RequestOptions]


def _as_options(request: Optional[BaseRequest]) -> RequestOptions:
    """Return a detached copy of *request* as a template."""
    if request is None:
        return RequestOptions()
    if isinstance(request, RequestDescriptor):
        return request.to_options()
    if isinstance(request, RequestOptions):
        request = RequestBuilder(request)
    return request.copy().options


class HttpClient:
    """Fluent, typed facade over a transport and a parser.

    Prefer :func:`chainhttp.new_client` or :func:`chainhttp.builder` over
    calling the constructor directly.

    Args:
        transport: Transport used for every dispatch.
        parser: Parser used for request and response bodies.
        base_request: Template every call is derived from.
    """

    def __init__(
        self,
        transport: Transport,
        parser: Parser,
        base_request: Optional[BaseRequest] = None,
    ) -> None:
        self._transport = transport
        self._parser = parser
        self._base = _as_options(base_request)

    def __repr__(self) -> str:
        return f"<HttpClient transport={type(self._transport).__name__} parser={type(self._parser).__name__}>"

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def parser(self) -> Parser:
        return self._parser

    @property
    def base_request(self) -> RequestBuilder:
        """A builder seeded from the base template.  Changing it does not affect the client."""
        return RequestBuilder(self._base).copy()

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpClient:
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ------------------------------------------------------------------ #
    # Verb shortcuts
    # ------------------------------------------------------------------ #

    def request(self, method: Union[str, HTTPMethod], uri: str, body: Any = None) -> PendingRequest:
        """Derive a pending request from the base template.

        Raises:
            ConfigurationError: If *method* is not a known HTTP method.
        """
        return PendingRequest(self, self.base_request.method(method, body).uri(uri))

    def get(self, uri: str) -> PendingRequest:
        return self.request(HTTPMethod.GET, uri)

    def post(self, uri: str, body: Any) -> PendingRequest:
        return self.request(HTTPMethod.POST, uri, body)

    def put(self, uri: str, body: Any) -> PendingRequest:
        return self.request(HTTPMethod.PUT, uri, body)

    def patch(self, uri: str, body: Any) -> PendingRequest:
        return self.request(HTTPMethod.PATCH, uri, body)

    def delete(self, uri: str) -> PendingRequest:
        return self.request(HTTPMethod.DELETE, uri)

    def pending(self) -> PendingRequest:
        """The base template itself as a pending request."""
        return PendingRequest(self, self.base_request)

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    @overload
    def send_async(self) -> Awaitable[RawResponse]: ...

    @overload
    def send_async(self, target: type[T]) -> Awaitable[ResponseWrapper[T]]: ...

    def send_async(self, target: Optional[Any] = None) -> Awaitable[Any]:
        """Send the base request as-is.

        Raises:
            ConfigurationError: If the base request lacks a method or uri.
        """
        return self.pending().send_async(target)

    @overload
    def send_request_async(self, request: Union[RequestDescriptor, RequestBuilder]) -> Awaitable[RawResponse]: ...

    @overload
    def send_request_async(
        self, request: Union[RequestDescriptor, RequestBuilder], target: type[T]
    ) -> Awaitable[ResponseWrapper[T]]: ...

    def send_request_async(
        self,
        request: Union[RequestDescriptor, RequestBuilder],
        target: Optional[Any] = None,
    ) -> Awaitable[Any]:
        """Send an explicitly built request, ignoring the base template."""
        if isinstance(request, RequestBuilder):
            request = request.build()
        if target is None:
            return self.dispatch(request)
        return self.new_call(request, target).send()

    def new_call(self, request: RequestDescriptor, target: type[T]) -> HttpCall[T]:
        """Return an unsent :class:`~chainhttp.client.call.HttpCall`."""
        return HttpCall(request, self.dispatch, self._parser, target)

    async def dispatch(self, request: RequestDescriptor) -> RawResponse:
        """Serialise the body of *request* and send it through the transport.

        Raises:
            DeserializationError: If the body cannot be serialised.
            TransportError: If the transport fails.
        """
        return await self._transport.send(self._to_wire(request))

    def _to_wire(self, request: RequestDescriptor) -> RequestDescriptor:
        """Return *request* with its body serialised by the parser."""
        body = request.body
        if body is None or isinstance(body, (str, bytes)):
            return request
        headers = dict(request.headers)
        if request.header("Content-Type") is None:
            headers["Content-Type"] = self._parser.content_type
        return request.model_copy(update={"body": self._parser.serialize(body), "headers": headers})


class ClientBuilder:
    """Configure and create an :class:`HttpClient`.

    Unset collaborators fall back to defaults in :meth:`get_client`: no base
    request, settings from :func:`~chainhttp.config.resolve_settings`, an
    :class:`~chainhttp.transport.HttpxTransport` and the default parser.
    """

    def __init__(self) -> None:
        self._base: Optional[RequestOptions] = None
        self._settings: Optional[ClientSettings] = None
        self._transport: Optional[Transport] = None
        self._parser: Optional[Parser] = None

    def set_base_request(self, request: BaseRequest) -> ClientBuilder:
        self._base = _as_options(request)
        return self

    def set_client(self, settings: ClientSettings) -> ClientBuilder:
        """Settings for the default httpx transport."""
        self._settings = settings
        return self

    def set_transport(self, transport: Transport) -> ClientBuilder:
        self._transport = transport
        return self

    def set_parser(self, parser: Parser) -> ClientBuilder:
        self._parser = parser
        return self

    def get_client(self) -> HttpClient:
        """Create the client.

        Raises:
            ConfigurationError: If both settings and a custom transport were
                given (settings only configure the default transport), or
                the resolved settings are invalid.
        """
        if self._transport is not None and self._settings is not None:
            raise ConfigurationError(
                "set_client() configures the default transport; it cannot be combined with set_transport()"
            )
        transport = self._transport or HttpxTransport(self._settings or resolve_settings())
        return HttpClient(
            transport=transport,
            parser=self._parser or create_default_parser(),
            base_request=self._base,
        )


def new_client() -> HttpClient:
    """Return a client with no base request, default settings, transport and parser."""
    return ClientBuilder().get_client()


def builder() -> ClientBuilder:
    return ClientBuilder()
