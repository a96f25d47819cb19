from __future__ import annotations

import asyncio
from enum import Enum, unique
import logging
from typing import Any, Optional, Tuple

from musiccast_control.configuration import config
from musiccast_control.connection import MsgBus
from musiccast_control.const import (
    EVENT_DECODE_ERROR,
    EVENT_ERROR,
    EVENT_LISTENING,
    EVENT_MESSAGE,
)
from musiccast_control.exceptions import EventReceiverError, MessageFormatError
from musiccast_control.message import (
    DecodeErrorEvent,
    ListeningEvent,
    NotificationEvent,
    ReceiverErrorEvent,
)

_LOGGER = logging.getLogger(__name__)


@unique
class SocketState(Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    CLOSED = "closed"


class NotificationProtocol(asyncio.DatagramProtocol):
    def __init__(self, receiver: EventReceiver) -> None:
        super().__init__()
        self._receiver = receiver
        self.transport: Optional[asyncio.DatagramTransport] = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore

    def datagram_received(self, data: bytes, addr: Tuple[Any, ...]) -> None:
        self._receiver._handle_datagram(data, addr)

    def error_received(self, exc: Exception) -> None:
        self._receiver._handle_error(self.transport, exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            self._receiver._handle_error(self.transport, exc)


class EventReceiver:
    """Receive the UDP event notifications the device pushes to X-AppPort.

    Emits on the bus:
        listening     ListeningEvent, once a bind succeeded
        message       NotificationEvent, per decoded datagram
        decode_error  DecodeErrorEvent, per datagram that is not UTF-8 JSON
        error         ReceiverErrorEvent, per socket fault

    A socket fault closes the socket, the receiver never rebinds by itself.
    """

    def __init__(self, bus: Optional[MsgBus] = None, host: Optional[str] = None):
        self._bus = bus if bus is not None else MsgBus()
        self._host = host if host is not None else config["receiver"]["host"]
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._port: Optional[int] = None
        self._state = SocketState.UNBOUND
        self._bind_lock = asyncio.Lock()

    @property
    def bus(self) -> MsgBus:
        return self._bus

    @property
    def state(self) -> SocketState:
        return self._state

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def transport(self) -> Optional[asyncio.DatagramTransport]:
        return self._transport

    async def bind(self, port: int) -> None:
        """Bind a new socket to port, closing any socket already open."""

        async with self._bind_lock:
            self._close_transport()
            # A closed socket is only released on the next loop iteration
            await asyncio.sleep(0)
            self._state = SocketState.UNBOUND

            _LOGGER.debug("EVENTRECEIVER: Binding to %s:%s", self._host, port)
            loop = asyncio.get_running_loop()
            try:
                transport, _ = await loop.create_datagram_endpoint(
                    lambda: NotificationProtocol(self), local_addr=(self._host, port)
                )
            except OSError as exc:
                _LOGGER.error(
                    "EVENTRECEIVER: Unable to bind to %s:%s: %s", self._host, port, exc
                )
                self._state = SocketState.CLOSED
                self._port = None
                self._bus.emit_event(EVENT_ERROR, ReceiverErrorEvent(exc))
                raise EventReceiverError(
                    f"Unable to bind event receiver to port {port}"
                ) from exc

            self._transport = transport  # type: ignore
            address, bound_port = transport.get_extra_info("sockname")[:2]
            self._port = bound_port
            self._state = SocketState.BOUND
            _LOGGER.info("EVENTRECEIVER: Listening on %s:%s", address, bound_port)
            self._bus.emit_event(EVENT_LISTENING, ListeningEvent(address, bound_port))

    def close(self) -> None:
        self._close_transport()
        self._state = SocketState.CLOSED

    def _close_transport(self) -> None:
        if self._transport is None:
            return

        transport = self._transport
        self._transport = None
        try:
            transport.close()
        except Exception as exc:
            _LOGGER.debug("EVENTRECEIVER: Ignoring error while closing socket: %s", exc)

    def _handle_datagram(self, data: bytes, addr: Tuple[Any, ...]) -> None:
        try:
            event = NotificationEvent.from_datagram(data, addr)
        except MessageFormatError as exc:
            _LOGGER.warning(
                "EVENTRECEIVER: Undecodable datagram from %s:%s: %s",
                addr[0],
                addr[1],
                exc,
            )
            self._bus.emit_event(
                EVENT_DECODE_ERROR,
                DecodeErrorEvent(
                    sender_address=addr[0], sender_port=addr[1], data=data, reason=str(exc)
                ),
            )
        else:
            _LOGGER.debug("EVENTRECEIVER: Notification: %s", event)
            self._bus.emit_event(EVENT_MESSAGE, event)

    def _handle_error(
        self, transport: Optional[asyncio.DatagramTransport], exc: Exception
    ) -> None:
        # A fault reported by a socket already replaced by bind() is stale
        if transport is not None and transport is not self._transport:
            _LOGGER.debug("EVENTRECEIVER: Ignoring fault of replaced socket: %s", exc)
            return

        _LOGGER.error("EVENTRECEIVER: Socket error, closing socket: %s", exc)
        self.close()
        self._bus.emit_event(EVENT_ERROR, ReceiverErrorEvent(exc))
