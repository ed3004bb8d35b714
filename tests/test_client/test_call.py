"""Tests for the HttpCall lifecycle."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from chainhttp.client.call import HttpCall
from chainhttp.exceptions import DeserializationError, StateError, TransportError
from chainhttp.models import CallState, RawResponse, RedirectPolicy
from chainhttp.parser import JsonParser
from chainhttp.request import RequestDescriptor, new_builder

from todos import TODO_1_BODY, TODO_1_URL, Todo, assert_todo_1


def _request() -> RequestDescriptor:
    return new_builder().uri(TODO_1_URL).get().build()


def _call(dispatch) -> HttpCall[Todo]:
    return HttpCall(_request(), dispatch, JsonParser(), Todo)


async def _ok(request: RequestDescriptor) -> RawResponse:
    return RawResponse(status_code=200, body=TODO_1_BODY, method=request.method.value, url=request.uri)


async def _timeout(request: RequestDescriptor) -> RawResponse:
    raise TransportError("GET timed out", cause=TimeoutError("timed out"))


class TestCompleted:
    def test_states(self) -> None:
        call = _call(_ok)
        assert call.state is CallState.BUILT
        wrapper = asyncio.run(call.send())
        assert call.state is CallState.COMPLETED
        assert call.response is wrapper
        assert call.error is None

    def test_interpretation(self) -> None:
        call = _call(_ok)
        asyncio.run(call.send())
        assert_todo_1(call.as_object())
        assert call.as_object() == call.as_object()

    def test_shape_mismatch_still_raises_deserialization_error(self) -> None:
        call = _call(_ok)
        asyncio.run(call.send())
        with pytest.raises(DeserializationError):
            call.as_list()
        assert call.state is CallState.COMPLETED

    def test_second_send_is_rejected(self) -> None:
        call = _call(_ok)
        asyncio.run(call.send())
        with pytest.raises(StateError, match="already completed"):
            asyncio.run(call.send())


class TestNotDispatched:
    def test_interpreting_before_send(self) -> None:
        call = _call(_ok)
        with pytest.raises(StateError, match="built"):
            call.as_object()
        with pytest.raises(StateError):
            call.as_list()
        with pytest.raises(StateError):
            call.response


class TestFailed:
    def test_transport_error_propagates(self) -> None:
        call = _call(_timeout)
        with pytest.raises(TransportError):
            asyncio.run(call.send())
        assert call.state is CallState.FAILED
        assert isinstance(call.error, TransportError)

    def test_interpreting_failed_call_raises_state_error(self) -> None:
        call = _call(_timeout)
        with pytest.raises(TransportError):
            asyncio.run(call.send())
        with pytest.raises(StateError, match="failed"):
            call.as_object()
        with pytest.raises(StateError, match="failed"):
            call.as_list()

    def test_failed_call_cannot_be_resent(self) -> None:
        call = _call(_timeout)
        with pytest.raises(TransportError):
            asyncio.run(call.send())
        with pytest.raises(StateError):
            asyncio.run(call.send())

    def test_redirect_loop_fails_call(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        call = make_client(handler).get(TODO_1_URL).follow_redirects(RedirectPolicy.ALWAYS).call(Todo)
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(call.send())
        assert isinstance(exc_info.value.cause, httpx.TooManyRedirects)
        assert call.state is CallState.FAILED
        assert call.error is exc_info.value
        with pytest.raises(StateError, match="failed"):
            call.as_object()

    def test_unexpected_dispatcher_error_fails_call(self) -> None:
        async def broken(request: RequestDescriptor) -> RawResponse:
            raise RuntimeError("transport bug")

        call = _call(broken)
        with pytest.raises(RuntimeError, match="transport bug"):
            asyncio.run(call.send())
        assert call.state is CallState.FAILED
        assert isinstance(call.error, RuntimeError)
        with pytest.raises(StateError, match="failed"):
            call.as_list()


class TestCancellation:
    def test_cancelled_call_never_completes(self) -> None:
        started = asyncio.Event()

        async def hang(request: RequestDescriptor) -> RawResponse:
            started.set()
            await asyncio.sleep(3600)
            raise AssertionError("unreachable")  # pragma: no cover

        call = _call(hang)

        async def run() -> None:
            task = asyncio.ensure_future(call.send())
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())
        assert call.state is CallState.DISPATCHED
        with pytest.raises(StateError):
            call.as_object()
