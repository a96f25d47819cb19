from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Optional, Tuple, Union

from musiccast_control.configuration import config
from musiccast_control.const import RESPONSE_CODE, RESPONSE_CODE_OK
from musiccast_control.exceptions import MessageFormatError, ResponseCodeError

_LOGGER = logging.getLogger(__name__)

RESPONSE_CODES = {
    0: "Successful request",
    1: "Initializing",
    2: "Internal Error",
    3: "Invalid Request (A method did not exist, a method wasn't appropriate etc.)",
    4: "Invalid Parameter (Out of range, invalid characters etc.)",
    5: "Guarded (Unable to setup in current status etc.)",
    6: "Time Out",
    99: "Firmware Updating",
    100: "Access Error",
    101: "Other Errors",
    102: "Wrong User Name",
    103: "Wrong Password",
    104: "Account Expired",
    105: "Account Disconnected/Gone Off/Shut Down",
    106: "Account Number Reached to the Limit",
    107: "Server Maintenance",
    108: "Invalid Account",
    109: "License Error",
    110: "Read Only Mode",
    111: "Max Stations",
    112: "Access Denied",
}


@dataclass
class NotificationEvent:
    sender_address: str
    sender_port: int
    payload: Any

    @classmethod
    def from_datagram(cls, data: bytes, addr: Tuple[Any, ...]) -> NotificationEvent:
        return NotificationEvent(
            sender_address=addr[0],
            sender_port=addr[1],
            payload=process_notification(data),
        )


@dataclass
class DecodeErrorEvent:
    """A datagram arrived that could not be decoded as a UTF-8 JSON document."""

    sender_address: str
    sender_port: int
    data: bytes
    reason: str


@dataclass
class ListeningEvent:
    address: str
    port: int


@dataclass
class ReceiverErrorEvent:
    error: BaseException


MusicCastEvent = Union[
    NotificationEvent, DecodeErrorEvent, ListeningEvent, ReceiverErrorEvent
]


def process_notification(data: bytes) -> Any:
    """
    Decode a notification datagram pushed by the device.

    One datagram carries exactly one JSON document, there is no other framing.
    """
    _LOGGER.debug("NOTIFICATION: Process received datagram: %s", data)
    try:
        return json.loads(data.decode(config["receiver"]["encoding"]))
    except UnicodeDecodeError as exc:
        raise MessageFormatError(f"Datagram is not valid UTF-8: {exc}") from exc
    except ValueError as exc:
        raise MessageFormatError(f"Datagram is not valid JSON: {exc}") from exc


def process_response(body: Any, result_key: Optional[str] = None) -> Any:
    """
    Unwrap the response envelope returned by every endpoint.

    response_code 0 returns the body, or only body[result_key] for endpoints
    nesting their result under a known key. Any other code, or a missing one,
    raises ResponseCodeError carrying the full body.
    """
    if not isinstance(body, dict):
        raise MessageFormatError(f"Response body is not a JSON object: {body!r}")

    code = body.get(RESPONSE_CODE)
    if code != RESPONSE_CODE_OK:
        description = RESPONSE_CODES.get(code, "Unknown response code")
        _LOGGER.debug("ENVELOPE: response_code %s - %s", code, description)
        raise ResponseCodeError(
            body, f"Device reported response_code {code}: {description}"
        )

    if result_key is not None:
        return body.get(result_key)
    return body


def format_params(params: Optional[dict[str, Any]]) -> Optional[dict[str, Union[str, int, float]]]:
    """Query string values as the device expects them: lower case booleans, no Nones."""
    if params is None:
        return None

    formatted: dict[str, Union[str, int, float]] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            formatted[key] = "true" if value else "false"
        else:
            formatted[key] = value
    return formatted
