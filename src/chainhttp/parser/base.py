"""Abstract base class for body parsers.

A parser is the serialisation capability injected into a
:class:`~chainhttp.client.facade.HttpClient`.  It turns request bodies into
wire text and response text into typed values:

- :meth:`Parser.serialize` -- value to text, used at send time.
- :meth:`Parser.deserialize` -- text to exactly one ``T``.
- :meth:`Parser.deserialize_list` -- text to a ``list[T]``.

The caller picks the shape; parsers never guess between one object and a
list of objects.

Concrete parsers validate with :class:`pydantic.TypeAdapter`, so a target
type can be a Pydantic model, a dataclass, a ``TypedDict`` or any builtin
container.  :func:`type_adapter` caches one adapter per type.

See Also:
    :mod:`chainhttp.parser.json_parser` and
    :mod:`chainhttp.parser.yaml_parser` for the built-in implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=256)
def type_adapter(tp: Any) -> TypeAdapter[Any]:
    """Return a cached :class:`~pydantic.TypeAdapter` for *tp*."""
    return TypeAdapter(tp)


def describe_type(tp: Any) -> str:
    """Human-readable name of *tp* for error messages."""
    if getattr(tp, "__args__", None):
        return repr(tp)
    return getattr(tp, "__name__", None) or repr(tp)


class Parser(ABC):
    """Abstract base class for body parsers.

    Subclasses must implement :meth:`serialize`, :meth:`deserialize` and
    :meth:`deserialize_list`, and set :attr:`content_type`, which the client
    uses as the default ``Content-Type`` of serialised request bodies.
    """

    content_type: str = "application/octet-stream"

    @abstractmethod
    def serialize(self, value: Any) -> str:
        """Convert *value* to its wire representation.

        Raises:
            DeserializationError: If the value cannot be serialised.
        """
        ...

    @abstractmethod
    def deserialize(self, text: str, target: type[T]) -> T:
        """Parse *text* into exactly one instance of *target*.

        Raises:
            DeserializationError: If *text* is malformed or is not a
                single-entity representation of *target*.
        """
        ...

    @abstractmethod
    def deserialize_list(self, text: str, target: type[T]) -> list[T]:
        """Parse *text* into an ordered list of *target* instances.

        Raises:
            DeserializationError: If *text* is malformed or is not an
                array of *target* representations.
        """
        ...
