"""Exception hierarchy for chainhttp.

All exceptions inherit from :class:`ChainHttpError` so callers can catch
every failure raised by the facade with a single ``except`` clause.

Subclass hierarchy::

    ChainHttpError
    +-- ConfigurationError    (incomplete request, invalid settings)
    +-- TransportError        (network / timeout / protocol failure)
    +-- DeserializationError  (body does not match the requested shape)
    +-- StateError            (interpreting a call that did not complete)
    +-- HttpStatusError       (only from ``raise_for_status``)
        +-- AuthError         (401 / 403)
        +-- NotFoundError     (404)
        +-- ServerError       (any other 4xx / 5xx)

:class:`ConfigurationError` and :class:`StateError` are raised synchronously
at the call that breaks the contract.  :class:`TransportError` and
:class:`DeserializationError` surface from the awaited call or from the
interpretation step.
"""

from __future__ import annotations

from typing import Optional


class ChainHttpError(Exception):
    """Base exception for all chainhttp errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ChainHttpError):
    """Raised when a request or the client settings are incomplete or invalid."""


class TransportError(ChainHttpError):
    """Raised when the transport fails to produce a response.

    The underlying exception is kept on :attr:`cause` and is also chained
    as ``__cause__`` by the raising site.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DeserializationError(ChainHttpError):
    """Raised when a body cannot be parsed into the requested type or shape.

    Also raised when a request body cannot be serialised.
    """

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class StateError(ChainHttpError):
    """Raised when a call is used in a state that does not allow the operation."""


class HttpStatusError(ChainHttpError):
    """Raised by ``raise_for_status`` for HTTP 4xx / 5xx responses."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class AuthError(HttpStatusError):
    """Raised when the server rejects the credentials (401 / 403)."""


class NotFoundError(HttpStatusError):
    """Raised when the server returns HTTP 404."""


class ServerError(HttpStatusError):
    """Raised for any other HTTP error status."""
