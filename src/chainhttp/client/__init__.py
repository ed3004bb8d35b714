"""Client facade -- derive, dispatch and interpret requests.

Classes:
    :class:`HttpClient` -- the facade bound to a transport and a parser.
    :class:`ClientBuilder` -- fluent configuration of an :class:`HttpClient`.
    :class:`PendingRequest` -- a derived request not yet sent.
    :class:`HttpCall` -- one dispatch with an explicit lifecycle.
    :class:`ResponseWrapper` -- deferred typed interpretation of a response.

Example::

    from chainhttp.client import new_client

    todos = await new_client().get(TODOS_URL).body_list_async(Todo)
"""

from chainhttp.client.call import HttpCall
from chainhttp.client.facade import ClientBuilder, HttpClient, builder, new_client
from chainhttp.client.pending import PendingRequest
from chainhttp.client.response import ResponseWrapper, format_response

__all__ = [
    "HttpClient",
    "ClientBuilder",
    "PendingRequest",
    "HttpCall",
    "ResponseWrapper",
    "builder",
    "format_response",
    "new_client",
]
