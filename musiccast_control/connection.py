from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional

import aiohttp

from musiccast_control.configuration import config
from musiccast_control.const import HEADER_APP_NAME, HEADER_APP_PORT, METHOD_GET, METHOD_POST
from musiccast_control.exceptions import MessageFormatError, TransportError
from musiccast_control.message import MusicCastEvent, format_params, process_response
from musiccast_control.musiccast_typing import EventName, HttpMethod

_LOGGER = logging.getLogger(__name__)


class MsgBus:
    def __init__(self) -> None:
        self.subscribers: dict[str, set[Callable[..., Coroutine]]] = {}
        self._tasks: set[asyncio.Task] = set()

    def add_subscriber(
        self, subscriber: Callable[..., Coroutine], event_name: EventName
    ) -> None:
        if not self.subscribers.get(event_name, None):
            self.subscribers[event_name] = {subscriber}
        else:
            self.subscribers[event_name].add(subscriber)

    def remove_subscriber(
        self, subscriber: Callable[..., Coroutine], event_name: EventName
    ) -> None:
        self.subscribers[event_name].remove(subscriber)

        if len(self.subscribers[event_name]) == 0:
            del self.subscribers[event_name]

    def emit_event(self, event_name: EventName, event: MusicCastEvent) -> None:
        message = {"event_name": event_name, "event": event}

        for subscriber in self.subscribers.get(event_name, set()):
            task = asyncio.create_task(subscriber(message))
            # The loop only keeps weak references to tasks
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)


class AsyncConnection:
    """HTTP transport shared by every subsystem client of one device.

    Each request carries the X-AppName and X-AppPort headers, the latter tells
    the device which local UDP port to push event notifications to.
    """

    def __init__(
        self,
        ip: str,
        event_port: int,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        transport = config["comms"]["transport"]
        self._ip = ip
        self._event_port = event_port
        self._base_url = "{}://{}:{}{}".format(
            transport["scheme"], ip, transport["port"], transport["api_path"]
        )

        if timeout:
            self._timeout = aiohttp.ClientTimeout(total=timeout)
        else:
            self._timeout = aiohttp.ClientTimeout(total=transport["timeout"])

        self._headers = {
            HEADER_APP_NAME: config["comms"]["headers"]["app_name"],
            HEADER_APP_PORT: str(event_port),
        }

        self._session = session
        self._owns_session = session is None

    @property
    def ip(self) -> str:
        return self._ip

    @property
    def event_port(self) -> int:
        return self._event_port

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> Any:
        return await self.send_request(
            METHOD_GET, path, params=params, result_key=result_key
        )

    async def post(
        self,
        path: str,
        data: Optional[dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> Any:
        return await self.send_request(
            METHOD_POST, path, data=data, result_key=result_key
        )

    async def send_request(
        self,
        method: HttpMethod,
        path: str,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> Any:
        """Send a request to the device and unwrap its response envelope."""

        url = f"{self._base_url}/{path.lstrip('/')}"
        query = format_params(params)
        _LOGGER.debug(
            "SENDREQUEST: %s %s params=%s data=%s", method, url, query, data
        )

        try:
            async with self._get_session().request(
                method,
                url,
                params=query,
                json=data,
                headers=self._headers,
                timeout=self._timeout,
            ) as response:
                response.raise_for_status()
                body = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            _LOGGER.debug("SENDREQUEST: %s %s raised %s", method, url, repr(exc))
            raise TransportError(exc) from exc
        except ValueError as exc:
            raise MessageFormatError(f"{method} {url} returned invalid JSON") from exc

        _LOGGER.debug("SENDREQUEST: Response: %s", body)
        return process_response(body, result_key)
