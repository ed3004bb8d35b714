"""JSON body parser backed by :class:`pydantic.TypeAdapter`.

:class:`JsonParser` is the default parser of every client.  Blank bodies
are read as ``{}`` by :meth:`~JsonParser.deserialize` and as ``[]`` by
:meth:`~JsonParser.deserialize_list`: a ``DELETE`` that answers with an
empty body still yields an entity whose fields hold their defaults, while
an entity with required fields fails with
:class:`~chainhttp.exceptions.DeserializationError`.

Example::

    parser = JsonParser()
    todo = parser.deserialize('{"id": 1, "title": "x"}', Todo)
    text = parser.serialize(todo)
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, PydanticSchemaGenerationError, ValidationError
from pydantic_core import PydanticSerializationError

from chainhttp.exceptions import DeserializationError
from chainhttp.parser.base import Parser, describe_type, type_adapter

T = TypeVar("T")


class JsonParser(Parser):
    """Serialise and validate JSON bodies.

    Args:
        by_alias: Serialise model fields under their aliases (e.g.
            ``userId`` for a field declared as ``user_id`` with an alias).
        strict: Validate in Pydantic strict mode (no type coercion).
        exclude_none: Drop ``None`` fields when serialising.
    """

    content_type = "application/json; charset=utf-8"

    def __init__(self, by_alias: bool = True, strict: bool = False, exclude_none: bool = False) -> None:
        self._by_alias = by_alias
        self._strict = strict
        self._exclude_none = exclude_none

    def serialize(self, value: Any) -> str:
        try:
            if isinstance(value, BaseModel):
                return value.model_dump_json(by_alias=self._by_alias, exclude_none=self._exclude_none)
            data = type_adapter(type(value)).dump_json(
                value, by_alias=self._by_alias, exclude_none=self._exclude_none
            )
        except (PydanticSerializationError, PydanticSchemaGenerationError) as exc:
            raise DeserializationError(
                f"Cannot serialise {describe_type(type(value))} to JSON: {exc}"
            ) from exc
        return data.decode("utf-8")

    def deserialize(self, text: str, target: type[T]) -> T:
        return self._validate(text or "", target, blank="{}")

    def deserialize_list(self, text: str, target: type[T]) -> list[T]:
        return self._validate(text or "", list[target], blank="[]")  # type: ignore[valid-type]

    def _validate(self, text: str, target: Any, blank: str) -> Any:
        payload = text if text.strip() else blank
        try:
            return type_adapter(target).validate_json(payload, strict=self._strict)
        except (ValidationError, PydanticSchemaGenerationError) as exc:
            raise DeserializationError(
                f"Cannot parse body as {describe_type(target)}: {exc}", body=text
            ) from exc
