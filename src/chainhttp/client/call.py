"""Single HTTP call with an explicit lifecycle.

An :class:`HttpCall` moves through ``BUILT -> DISPATCHED -> COMPLETED``
or ``BUILT -> DISPATCHED -> FAILED``:

* :meth:`HttpCall.send` may be awaited once.  Awaiting it again raises
  :class:`~chainhttp.exceptions.StateError`.
* A completed call interprets its body any number of times through
  :meth:`HttpCall.as_object` / :meth:`HttpCall.as_list`.
* A failed call keeps the failure on :attr:`HttpCall.error`, whatever its
  exception type; interpreting it raises
  :class:`~chainhttp.exceptions.StateError` instead of parsing a body that
  does not exist.

Cancelling the task awaiting :meth:`HttpCall.send` cancels the transport
request; the call then stays ``DISPATCHED`` and never completes.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Generic, Optional, TypeVar

from chainhttp.client.response import ResponseWrapper
from chainhttp.exceptions import StateError
from chainhttp.models import CallState, RawResponse
from chainhttp.parser.base import Parser
from chainhttp.request import RequestDescriptor

T = TypeVar("T")

Dispatcher = Callable[[RequestDescriptor], Awaitable[RawResponse]]


class HttpCall(Generic[T]):
    """One dispatch of a :class:`~chainhttp.request.RequestDescriptor`.

    Usually obtained from :meth:`~chainhttp.client.pending.PendingRequest.call`.

    Args:
        request: The complete request to send.
        dispatch: Coroutine function that serialises and sends a request.
        parser: Parser handed to the resulting wrapper.
        target: Entity type the body is interpreted as.
    """

    def __init__(
        self,
        request: RequestDescriptor,
        dispatch: Dispatcher,
        parser: Parser,
        target: type[T],
    ) -> None:
        self._request = request
        self._dispatch = dispatch
        self._parser = parser
        self._target = target
        self._state = CallState.BUILT
        self._response: Optional[ResponseWrapper[T]] = None
        self._error: Optional[Exception] = None

    def __repr__(self) -> str:
        return f"<HttpCall {self._request.method.value} {self._request.uri} {self._state.value}>"

    @property
    def request(self) -> RequestDescriptor:
        return self._request

    @property
    def state(self) -> CallState:
        return self._state

    @property
    def error(self) -> Optional[Exception]:
        """The failure of a ``FAILED`` call, ``None`` otherwise."""
        return self._error

    @property
    def response(self) -> ResponseWrapper[T]:
        """The wrapper of a ``COMPLETED`` call.

        Raises:
            StateError: If the call has not completed.
        """
        if self._state is not CallState.COMPLETED or self._response is None:
            raise StateError(self._not_completed_message())
        return self._response

    async def send(self) -> ResponseWrapper[T]:
        """Dispatch the request and wrap the response.

        Raises:
            StateError: If the call was already dispatched.
            TransportError: If the transport fails; the call becomes ``FAILED``.
            DeserializationError: If the request body cannot be serialised;
                the call becomes ``FAILED``.
            Exception: Anything else raised by the dispatcher is re-raised
                unchanged; the call still becomes ``FAILED``.
        """
        if self._state is not CallState.BUILT:
            raise StateError(f"Call already {self._state.value}; build a new call to send again")
        self._state = CallState.DISPATCHED

        try:
            raw = await self._dispatch(self._request)
        except Exception as exc:
            self._state = CallState.FAILED
            self._error = exc
            raise

        self._response = ResponseWrapper(raw, self._parser, self._target)
        self._state = CallState.COMPLETED
        return self._response

    def as_object(self) -> T:
        """Interpret the completed response as one ``T``."""
        return self.response.as_object()

    def as_list(self) -> list[T]:
        """Interpret the completed response as a ``list[T]``."""
        return self.response.as_list()

    def _not_completed_message(self) -> str:
        if self._state is CallState.FAILED:
            return f"Call failed and has no response to interpret: {self._error}"
        return f"Call is {self._state.value}; await send() before interpreting the response"
