"""chainhttp -- a fluent, typed facade over an asynchronous HTTP client.

Build a request, dispatch it asynchronously and interpret the response body
as one entity or as a list of entities, without wiring serialisation code at
every call site.

Typical usage::

    import chainhttp

    client = chainhttp.new_client()
    todo = await client.get("https://jsonplaceholder.typicode.com/todos/1").body_async(Todo)
    todos = await client.get("https://jsonplaceholder.typicode.com/todos").body_list_async(Todo)

Modules:
    client: The facade, pending requests, calls and response wrappers.
    request: Immutable request templates and the request builder.
    parser: Body parsers (JSON by default, YAML).
    transport: The transport interface and the httpx implementation.
    models: Enums, client settings and the raw response model.
    config: Settings resolution from file, environment and overrides.
    exceptions: The exception hierarchy.
    output: Diagnostics output (debug traces, response printing).
"""

from chainhttp.client import (
    ClientBuilder,
    HttpCall,
    HttpClient,
    PendingRequest,
    ResponseWrapper,
    builder,
    format_response,
    new_client,
)
from chainhttp.exceptions import (
    ChainHttpError,
    ConfigurationError,
    DeserializationError,
    StateError,
    TransportError,
)
from chainhttp.models import CallState, ClientSettings, HTTPMethod, HttpVersion, RawResponse, RedirectPolicy
from chainhttp.request import RequestBuilder, RequestDescriptor, RequestOptions, new_builder, with_overrides

__version__ = "0.1.0"

__all__ = [
    "CallState",
    "ChainHttpError",
    "ClientBuilder",
    "ClientSettings",
    "ConfigurationError",
    "DeserializationError",
    "HTTPMethod",
    "HttpCall",
    "HttpClient",
    "HttpVersion",
    "PendingRequest",
    "RawResponse",
    "RedirectPolicy",
    "RequestBuilder",
    "RequestDescriptor",
    "RequestOptions",
    "ResponseWrapper",
    "StateError",
    "TransportError",
    "builder",
    "format_response",
    "new_builder",
    "new_client",
    "with_overrides",
]
