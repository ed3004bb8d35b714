"""Body parsers -- turn typed values into wire text and back.

Typical usage::

    from chainhttp.parser import create_default_parser

    parser = create_default_parser()
    todos = parser.deserialize_list(body, Todo)

Sub-modules:

* :mod:`~chainhttp.parser.base` -- the :class:`Parser` interface.
* :mod:`~chainhttp.parser.json_parser` -- :class:`JsonParser`, the default.
* :mod:`~chainhttp.parser.yaml_parser` -- :class:`YamlParser`.
"""

from chainhttp.parser.base import Parser
from chainhttp.parser.json_parser import JsonParser
from chainhttp.parser.yaml_parser import YamlParser


def create_default_parser() -> Parser:
    """Return the parser used when a client is not given one."""
    return JsonParser()


__all__ = ["Parser", "JsonParser", "YamlParser", "create_default_parser"]
