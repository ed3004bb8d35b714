"""Settings resolution with a JSON settings file, environment and overrides.

:func:`resolve_settings` produces the :class:`~chainhttp.models.ClientSettings`
used by :func:`chainhttp.new_client` and by a
:class:`~chainhttp.client.facade.ClientBuilder` that was not given explicit
settings.

Precedence (high to low):
    1. Keyword overrides passed to :func:`resolve_settings`
    2. Environment variables (``CHAINHTTP_BASE_URL``, ``CHAINHTTP_TIMEOUT``,
       ``CHAINHTTP_VERIFY_SSL``, ``CHAINHTTP_HTTP_VERSION``,
       ``CHAINHTTP_FOLLOW_REDIRECTS``)
    3. Settings file (explicit path, ``CHAINHTTP_CONFIG``, or
       ``./chainhttp.json``)
    4. Defaults declared on :class:`~chainhttp.models.ClientSettings`
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from chainhttp.exceptions import ConfigurationError
from chainhttp.models import ClientSettings

_PROJECT_CONFIG_FILENAME = "chainhttp.json"
_CONFIG_ENV_VAR = "CHAINHTTP_CONFIG"

# Environment variable -> ClientSettings field
_ENV_FIELDS = {
    "CHAINHTTP_BASE_URL": "base_url",
    "CHAINHTTP_TIMEOUT": "timeout",
    "CHAINHTTP_VERIFY_SSL": "verify_ssl",
    "CHAINHTTP_HTTP_VERSION": "version",
    "CHAINHTTP_FOLLOW_REDIRECTS": "follow_redirects",
}


def _settings_path(path: Union[str, Path, None]) -> Optional[Path]:
    """Pick the settings file: explicit path, then env var, then the project file."""
    if path is not None:
        return Path(path)
    env_path = os.environ.get(_CONFIG_ENV_VAR, "")
    if env_path:
        return Path(env_path)
    local = Path.cwd() / _PROJECT_CONFIG_FILENAME
    return local if local.is_file() else None


def load_settings_file(path: Union[str, Path]) -> dict[str, Any]:
    """Load raw settings from a JSON file.

    Args:
        path: Path to a JSON object holding :class:`ClientSettings` fields.

    Returns:
        The parsed JSON object.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON, or
            does not contain a JSON object.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Settings file not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid settings file at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid settings file at {path}: expected a JSON object")
    return data


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect settings fields from ``CHAINHTTP_*`` environment variables.

    Empty variables are ignored.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for var, field in _ENV_FIELDS.items():
        raw = env.get(var, "")
        if raw:
            values[field] = raw
    return values


def resolve_settings(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ClientSettings:
    """Resolve :class:`ClientSettings` through the full precedence chain.

    Args:
        path: Optional settings file.  When omitted, ``CHAINHTTP_CONFIG`` and
            then ``./chainhttp.json`` are tried.
        environ: Environment mapping; defaults to :data:`os.environ`.
        **overrides: Field values with the highest precedence.  ``None``
            values are ignored.

    Raises:
        ConfigurationError: If the file or any merged value is invalid.
    """
    merged: dict[str, Any] = {}

    settings_file = _settings_path(path)
    if settings_file is not None:
        merged.update(load_settings_file(settings_file))

    merged.update(settings_from_env(environ))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ClientSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid client settings: {exc}") from exc
