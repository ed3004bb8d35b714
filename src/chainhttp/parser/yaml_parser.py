"""YAML body parser.

Parses with :func:`yaml.safe_load` and validates the resulting Python data
with the same :class:`pydantic.TypeAdapter` machinery as
:class:`~chainhttp.parser.json_parser.JsonParser`.  Useful for APIs that
answer ``application/yaml``.
"""

from __future__ import annotations

from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, PydanticSchemaGenerationError, ValidationError
from pydantic_core import PydanticSerializationError

from chainhttp.exceptions import DeserializationError
from chainhttp.parser.base import Parser, describe_type, type_adapter

T = TypeVar("T")


class YamlParser(Parser):
    """Serialise and validate YAML bodies."""

    content_type = "application/yaml"

    def __init__(self, by_alias: bool = True) -> None:
        self._by_alias = by_alias

    def serialize(self, value: Any) -> str:
        try:
            if isinstance(value, BaseModel):
                data = value.model_dump(mode="json", by_alias=self._by_alias)
            else:
                data = type_adapter(type(value)).dump_python(value, mode="json", by_alias=self._by_alias)
        except (PydanticSerializationError, PydanticSchemaGenerationError) as exc:
            raise DeserializationError(
                f"Cannot serialise {describe_type(type(value))} to YAML: {exc}"
            ) from exc
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    def deserialize(self, text: str, target: type[T]) -> T:
        return self._validate(text or "", target, blank={})

    def deserialize_list(self, text: str, target: type[T]) -> list[T]:
        return self._validate(text or "", list[target], blank=[])  # type: ignore[valid-type]

    def _validate(self, text: str, target: Any, blank: Any) -> Any:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DeserializationError(f"Invalid YAML body: {exc}", body=text) from exc
        if data is None:
            data = blank
        try:
            return type_adapter(target).validate_python(data)
        except (ValidationError, PydanticSchemaGenerationError) as exc:
            raise DeserializationError(
                f"Cannot parse body as {describe_type(target)}: {exc}", body=text
            ) from exc
