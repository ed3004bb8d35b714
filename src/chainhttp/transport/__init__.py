"""Transports -- the asynchronous I/O behind a client.

* :class:`Transport` -- the interface a client dispatches through.
* :class:`HttpxTransport` -- the default, backed by :class:`httpx.AsyncClient`.
"""

from chainhttp.transport.base import Transport
from chainhttp.transport.httpx_transport import HttpxTransport

__all__ = ["Transport", "HttpxTransport"]
