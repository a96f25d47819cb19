from typing import Literal, Union

EventName = Union[
    Literal["message"],
    Literal["error"],
    Literal["listening"],
    Literal["decode_error"],
]

HttpMethod = Union[Literal["GET"], Literal["POST"]]

ZoneId = Union[
    Literal["main"],
    Literal["zone2"],
    Literal["zone3"],
    Literal["zone4"],
    str,
]
