from __future__ import annotations

from typing import Any


class MessageFormatError(Exception):
    """The HTTP body or UDP datagram is not a JSON object."""


class ResponseCodeError(Exception):
    """The device answered the request with a nonzero response_code."""

    def __init__(self, response: Any, message: str = "") -> None:
        super().__init__(message or f"Device reported failure: {response!r}")
        self.response = response
        self.response_code = (
            response.get("response_code") if isinstance(response, dict) else None
        )


class TransportError(Exception):
    """The HTTP exchange failed before a response body was available."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(f"Transport failure: {error!r}")
        self.error = error


class EventReceiverError(Exception):
    """The event receiver socket could not be bound."""
