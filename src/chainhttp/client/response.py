"""Response wrapper -- deferred, typed interpretation of a raw response.

A :class:`ResponseWrapper` keeps the :class:`~chainhttp.models.RawResponse`
together with the client's parser and the caller's target type.  Nothing is
parsed until the caller asks for a shape:

* :meth:`ResponseWrapper.as_object` -- exactly one ``T``.
* :meth:`ResponseWrapper.as_list` -- a ``list[T]``.

Each call re-parses the stored body, so interpretation can be repeated and
always yields equal values.  Wrappers can be built directly from canned
responses in tests, without any transport.

:func:`format_response` bridges a wrapper to the diagnostics output.
"""

from __future__ import annotations

import json
from typing import Any, Generic, Optional, TypeVar

from chainhttp.exceptions import AuthError, HttpStatusError, NotFoundError, ServerError
from chainhttp.models import RawResponse
from chainhttp.output import get_output
from chainhttp.parser.base import Parser

T = TypeVar("T")


class ResponseWrapper(Generic[T]):
    """A completed response waiting to be interpreted as ``T``.

    Args:
        raw: The response returned by the transport.
        parser: Parser used for every interpretation.
        target: The entity type the body is parsed into.

    Example::

        wrapper = ResponseWrapper(raw, JsonParser(), Todo)
        todo = wrapper.as_object()
    """

    __slots__ = ("_raw", "_parser", "_target")

    def __init__(self, raw: RawResponse, parser: Parser, target: type[T]) -> None:
        self._raw = raw
        self._parser = parser
        self._target = target

    def __repr__(self) -> str:
        return f"<ResponseWrapper {self._raw.status_code} {self._raw.method} {self._raw.url}>"

    @property
    def raw(self) -> RawResponse:
        return self._raw

    @property
    def target(self) -> type[T]:
        return self._target

    @property
    def status_code(self) -> int:
        return self._raw.status_code

    @property
    def headers(self) -> dict[str, str]:
        return self._raw.headers

    @property
    def body(self) -> str:
        return self._raw.body

    @property
    def is_success(self) -> bool:
        return self._raw.is_success

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._raw.header(name, default)

    def as_object(self) -> T:
        """Parse the body into exactly one ``T``.

        Raises:
            DeserializationError: If the body is not a single-entity
                representation of ``T`` (for instance a JSON array).
        """
        return self._parser.deserialize(self._raw.body, self._target)

    def as_list(self) -> list[T]:
        """Parse the body into a ``list[T]``, preserving order.

        Raises:
            DeserializationError: If the body is not an array of ``T``.
        """
        return self._parser.deserialize_list(self._raw.body, self._target)

    def raise_for_status(self) -> ResponseWrapper[T]:
        """Raise a typed exception for HTTP error statuses, else return ``self``.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other 4xx / 5xx.
        """
        status = self._raw.status_code
        if status < 400:
            return self

        msg = _error_message(self._raw)
        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        exc_type: type[HttpStatusError]
        if status in (401, 403):
            exc_type = AuthError
        elif status == 404:
            exc_type = NotFoundError
        else:
            exc_type = ServerError
        raise exc_type(full_msg, status_code=status)


def _error_message(raw: RawResponse) -> str:
    """Pull a message out of a JSON error body, falling back to the text."""
    try:
        detail: Any = json.loads(raw.body)
    except ValueError:
        return raw.body[:200]
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("error") or detail.get("detail") or "")
    return str(detail)


def format_response(response: ResponseWrapper[Any]) -> None:
    """Print a response using the global output manager.

    Writes the status line (e.g. ``HTTP 200 GET https://...``) to stderr,
    then renders the body to stdout.  Empty bodies print nothing.
    """
    output = get_output()
    raw = response.raw
    output.info(f"HTTP {raw.status_code} {raw.method} {raw.url}".rstrip())

    content_type = raw.header("content-type", "application/json") or "application/json"
    if raw.body:
        output.format_response(raw.body, content_type)
