"""Abstract base class for transports.

A transport is the asynchronous I/O capability injected into a
:class:`~chainhttp.client.facade.HttpClient`.  It receives a
:class:`~chainhttp.request.RequestDescriptor` whose body has already been
serialised (``str``, ``bytes`` or ``None``) and returns a
:class:`~chainhttp.models.RawResponse`.

Implementations must raise :class:`~chainhttp.exceptions.TransportError`
(chained to the underlying exception) for connection, timeout and protocol
failures.  HTTP error statuses are *not* failures at this level: a 404 is a
completed response.

See Also:
    :mod:`chainhttp.transport.httpx_transport` for the default transport.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chainhttp.models import RawResponse
from chainhttp.request import RequestDescriptor


class Transport(ABC):
    """Abstract base class for transports.

    Transports may hold connections; :meth:`aclose` releases them.  Both
    the transport and the client wrapping it are async context managers.
    """

    @abstractmethod
    async def send(self, request: RequestDescriptor) -> RawResponse:
        """Send *request* and return the raw response.

        Args:
            request: A complete request with a serialised body.

        Returns:
            The status, headers and text body of the response.

        Raises:
            TransportError: On network, timeout or protocol failure.
        """
        ...

    async def aclose(self) -> None:
        """Release any resources held by the transport.  No-op by default."""

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
