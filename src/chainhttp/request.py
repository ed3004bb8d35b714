"""Immutable request templates, copy-and-override merging and the request builder.

Three types cooperate here:

* :class:`RequestOptions` -- a frozen, *partial* request where every field
  is optional.  It is the value a client keeps as its base template.
* :func:`with_overrides` -- the pure merge function: a new
  :class:`RequestOptions` with a patch applied over a base.
* :class:`RequestBuilder` -- a fluent wrapper around :class:`RequestOptions`.
  Every setter returns a **new** builder, so a builder shared between calls
  can be specialised without affecting the others.
* :class:`RequestDescriptor` -- the complete request produced by
  :meth:`RequestBuilder.build`.  ``method`` and ``uri`` are guaranteed.

Example::

    base = new_builder().uri("https://api.example.com/todos/1").header("Accept", "application/json")
    todo = base.copy().get().timeout(5).build()
    update = base.put(Todo(id=1, title="x")).build()
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chainhttp.exceptions import ConfigurationError
from chainhttp.models import HTTPMethod, HttpVersion, RedirectPolicy

OptionsPatch = Union["RequestOptions", Mapping[str, Any]]


class RequestOptions(BaseModel):
    """A partial request.  Only the fields explicitly set take part in merges."""

    model_config = ConfigDict(frozen=True)

    method: Optional[HTTPMethod] = None
    uri: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    timeout: Optional[float] = Field(default=None, gt=0, description="Seconds")
    version: Optional[HttpVersion] = None
    follow_redirects: Optional[RedirectPolicy] = None


class RequestDescriptor(BaseModel):
    """A complete request, ready to be handed to a transport.

    ``body`` holds the caller's value untouched; it is serialised by the
    client's parser at send time.  Strings and bytes are sent verbatim.
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    uri: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    timeout: Optional[float] = None
    version: Optional[HttpVersion] = None
    follow_redirects: Optional[RedirectPolicy] = None

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of header *name*, matched case-insensitively."""
        return _find_header(self.headers, name, default)

    def to_options(self) -> RequestOptions:
        """Return the descriptor as a template with every field set."""
        return RequestOptions(**_fields(self, RequestDescriptor))

    def copy(self) -> RequestBuilder:  # type: ignore[override]
        """Return a new builder seeded from this descriptor."""
        return RequestBuilder(self.to_options())


def _fields(model: BaseModel, cls: type[BaseModel]) -> dict[str, Any]:
    # Attribute access keeps body values as-is; model_dump would convert them.
    return {name: getattr(model, name) for name in cls.model_fields}


def _find_header(headers: Mapping[str, str], name: str, default: Optional[str]) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return default


def merge_headers(base: Mapping[str, str], patch: Mapping[str, str]) -> dict[str, str]:
    """Merge *patch* over *base*.  Names match case-insensitively; the patch wins.

    The stored name is the one used by the last write.
    """
    merged = dict(base)
    for name, value in patch.items():
        lowered = name.lower()
        for existing in [key for key in merged if key.lower() == lowered]:
            del merged[existing]
        merged[name] = value
    return merged


def _as_options(patch: OptionsPatch) -> RequestOptions:
    if isinstance(patch, RequestOptions):
        return patch
    try:
        return RequestOptions(**dict(patch))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid request option: {exc}") from exc


def with_overrides(base: RequestOptions, patch: OptionsPatch) -> RequestOptions:
    """Return a new :class:`RequestOptions` with *patch* merged over *base*.

    Only fields explicitly set on the patch override the base, so
    ``{"body": None}`` clears a body while an absent ``body`` keeps it.
    Headers are merged by name rather than replaced.  Neither argument is
    modified.

    Raises:
        ConfigurationError: If a mapping patch holds an invalid value.
    """
    patch = _as_options(patch)
    update = {name: getattr(patch, name) for name in patch.model_fields_set}
    if "headers" in update:
        update["headers"] = merge_headers(base.headers, patch.headers)
    else:
        update["headers"] = dict(base.headers)
    return base.model_copy(update=update)


class RequestBuilder:
    """Fluent, immutable request builder.

    Setters never modify the builder they are called on; they return a new
    builder holding the merged :class:`RequestOptions`.  :meth:`copy` is
    therefore only needed for readability at the point where a shared
    template is specialised.
    """

    __slots__ = ("_options",)

    def __init__(self, options: Optional[RequestOptions] = None) -> None:
        self._options = options if options is not None else RequestOptions()

    @classmethod
    def new(cls) -> RequestBuilder:
        return cls()

    @property
    def options(self) -> RequestOptions:
        """The current partial request."""
        return self._options

    def __repr__(self) -> str:
        return f"RequestBuilder({self._options!r})"

    # ------------------------------------------------------------------ #
    # Setters
    # ------------------------------------------------------------------ #

    def overrides(self, patch: Optional[OptionsPatch] = None, **fields: Any) -> RequestBuilder:
        """Return a builder with *patch* and *fields* merged over this one."""
        options = self._options
        if patch is not None:
            options = with_overrides(options, patch)
        if fields:
            options = with_overrides(options, fields)
        return RequestBuilder(options)

    def uri(self, uri: Union[str, httpx.URL]) -> RequestBuilder:
        return self.overrides(uri=str(uri))

    def header(self, name: str, value: str) -> RequestBuilder:
        """Set one header, replacing any value stored under the same name."""
        return self.overrides(headers={name: value})

    def headers(self, headers: Mapping[str, str]) -> RequestBuilder:
        return self.overrides(headers=dict(headers))

    def method(self, method: Union[str, HTTPMethod], body: Any = None) -> RequestBuilder:
        """Set the HTTP method and the body (cleared when ``None``).

        Raises:
            ConfigurationError: If *method* is not a known HTTP method.
        """
        try:
            verb = HTTPMethod(method.upper() if isinstance(method, str) else method)
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported HTTP method: {method!r}") from exc
        return self.overrides(method=verb, body=body)

    def get(self) -> RequestBuilder:
        return self.method(HTTPMethod.GET)

    def post(self, body: Any) -> RequestBuilder:
        return self.method(HTTPMethod.POST, body)

    def put(self, body: Any) -> RequestBuilder:
        return self.method(HTTPMethod.PUT, body)

    def patch(self, body: Any) -> RequestBuilder:
        return self.method(HTTPMethod.PATCH, body)

    def delete(self) -> RequestBuilder:
        return self.method(HTTPMethod.DELETE)

    def timeout(self, timeout: Union[float, timedelta]) -> RequestBuilder:
        """Set the request timeout, in seconds or as a :class:`~datetime.timedelta`."""
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        return self.overrides(timeout=timeout)

    def version(self, version: HttpVersion) -> RequestBuilder:
        return self.overrides(version=version)

    def follow_redirects(self, policy: RedirectPolicy) -> RequestBuilder:
        return self.overrides(follow_redirects=policy)

    def copy(self) -> RequestBuilder:
        """Return an independent builder with the same state.

        The copy owns its ``headers`` dict.
        """
        return RequestBuilder(self._options.model_copy(update={"headers": dict(self._options.headers)}))

    # ------------------------------------------------------------------ #
    # Finalisation
    # ------------------------------------------------------------------ #

    def build(self) -> RequestDescriptor:
        """Validate the options and return a :class:`RequestDescriptor`.

        Raises:
            ConfigurationError: If the method or uri is missing, or the uri
                is not a valid URL.
        """
        options = self._options
        missing = [name for name in ("method", "uri") if not getattr(options, name)]
        if missing:
            raise ConfigurationError(f"Cannot build request: missing {', '.join(missing)}")
        try:
            httpx.URL(options.uri)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(f"Invalid request uri {options.uri!r}: {exc}") from exc
        return RequestDescriptor(**_fields(options, RequestOptions))


def new_builder() -> RequestBuilder:
    """Return an empty :class:`RequestBuilder`."""
    return RequestBuilder()
