"""Shared test fixtures for chainhttp.

Provides a fake jsonplaceholder-style API served through
:class:`httpx.MockTransport`, clients wired to it, and isolation of the
global output manager and ``CHAINHTTP_*`` environment variables.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from chainhttp.client import HttpClient, builder
from chainhttp.models import ClientSettings
from chainhttp.output import OutputManager, reset_output, set_output
from chainhttp.transport import HttpxTransport

from todos import TODO_1, TODOS


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet, colourless output manager and reset it afterwards."""
    set_output(OutputManager(no_color=True, quiet=True, verbose=False))
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear CHAINHTTP_* variables and run each test from an empty directory."""
    for var in [
        "CHAINHTTP_CONFIG",
        "CHAINHTTP_BASE_URL",
        "CHAINHTTP_TIMEOUT",
        "CHAINHTTP_VERIFY_SSL",
        "CHAINHTTP_HTTP_VERSION",
        "CHAINHTTP_FOLLOW_REDIRECTS",
        "CHAINHTTP_DEBUG",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Fake todo API
# ---------------------------------------------------------------------------


def todo_api(request: httpx.Request) -> httpx.Response:
    """Answer like jsonplaceholder's /todos resource."""
    path = request.url.path
    method = request.method

    if path == "/todos" and method == "GET":
        return httpx.Response(200, json=TODOS)
    if path == "/todos" and method == "POST":
        created = json.loads(request.content)
        created["id"] = len(TODOS) + 1
        return httpx.Response(201, json=created)
    if path.startswith("/todos/"):
        todo_id = int(path.rsplit("/", 1)[1])
        if method == "GET":
            found = [t for t in TODOS if t["id"] == todo_id]
            if not found:
                return httpx.Response(404, json={})
            return httpx.Response(200, json=found[0])
        if method == "PUT":
            updated = json.loads(request.content)
            updated["id"] = todo_id
            return httpx.Response(200, json=updated)
        if method == "DELETE":
            return httpx.Response(200, json={})
    return httpx.Response(404, json={})


@pytest.fixture
def api_handler() -> Callable[[httpx.Request], httpx.Response]:
    return todo_api


@pytest.fixture
def make_client() -> Callable[..., HttpClient]:
    """Factory for clients whose transport is served by *handler*."""

    def _make(handler: Callable[[httpx.Request], Any] = todo_api, **settings: Any) -> HttpClient:
        transport = HttpxTransport(ClientSettings(**settings), transport=httpx.MockTransport(handler))
        return builder().set_transport(transport).get_client()

    return _make


@pytest.fixture
def client(make_client: Callable[..., HttpClient]) -> HttpClient:
    """Client wired to the fake todo API."""
    return make_client()


@pytest.fixture
def todo_1() -> dict[str, Any]:
    return dict(TODO_1)
