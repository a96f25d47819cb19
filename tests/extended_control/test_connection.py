import asyncio

import aiohttp
import pytest

from musiccast_control.connection import AsyncConnection, MsgBus
from musiccast_control.exceptions import (
    MessageFormatError,
    ResponseCodeError,
    TransportError,
)
from musiccast_control.message import ListeningEvent

from tests.command_response import system_responses
from tests.const import BASE_URL, EVENT_PORT, HOST
from tests.helper import build_url, event_collector, find_requests

device_info_url = build_url("system/getDeviceInfo")


class TestAsyncConnection:
    def test_base_url(self):
        connection = AsyncConnection(HOST, EVENT_PORT)
        assert connection.base_url == BASE_URL

    def test_headers(self):
        connection = AsyncConnection(HOST, 41100)
        assert connection.headers == {
            "X-AppName": "ERDesigns/1.0",
            "X-AppPort": "41100",
        }

    async def test_request_carries_headers_and_timeout(self, mock_http, connection):
        mock_http.get(device_info_url, payload=system_responses["getDeviceInfo"])

        await connection.get("system/getDeviceInfo")

        call = find_requests(mock_http, "GET", device_info_url)[0]
        assert call.kwargs["headers"] == {
            "X-AppName": "ERDesigns/1.0",
            "X-AppPort": str(EVENT_PORT),
        }
        assert call.kwargs["timeout"].total == 15.0

    async def test_custom_timeout(self, mock_http):
        connection = AsyncConnection(HOST, EVENT_PORT, timeout=2.5)
        mock_http.get(device_info_url, payload=system_responses["getDeviceInfo"])

        await connection.get("system/getDeviceInfo")
        await connection.close()

        call = find_requests(mock_http, "GET", device_info_url)[0]
        assert call.kwargs["timeout"].total == 2.5

    async def test_boolean_params_are_lower_case(self, mock_http, connection):
        url = build_url("system/setDimmer", enable="false")
        mock_http.get(url, payload={"response_code": 0})

        await connection.get("system/setDimmer", {"enable": False})

        assert len(find_requests(mock_http, "GET", url)) == 1

    async def test_none_params_are_dropped(self, mock_http, connection):
        url = build_url("cd/setPlayback", playback="play")
        mock_http.get(url, payload={"response_code": 0})

        await connection.get("cd/setPlayback", {"playback": "play", "num": None})

        assert len(find_requests(mock_http, "GET", url)) == 1

    async def test_post_sends_json_body(self, mock_http, connection):
        url = build_url("system/setNetworkName")
        mock_http.post(url, payload={"response_code": 0})

        await connection.post("system/setNetworkName", {"name": "Living Room"})

        call = find_requests(mock_http, "POST", url)[0]
        assert call.kwargs["json"] == {"name": "Living Room"}

    async def test_external_session_is_not_closed(self, mock_http):
        session = aiohttp.ClientSession()
        connection = AsyncConnection(HOST, EVENT_PORT, session=session)
        mock_http.get(device_info_url, payload=system_responses["getDeviceInfo"])

        await connection.get("system/getDeviceInfo")
        await connection.close()

        assert not session.closed
        await session.close()


class TestEnvelope:
    async def test_success_returns_body(self, mock_http, connection):
        mock_http.get(device_info_url, payload=system_responses["getDeviceInfo"])

        response = await connection.get("system/getDeviceInfo")

        assert response == system_responses["getDeviceInfo"]

    async def test_success_returns_result_key(self, mock_http, connection):
        url = build_url("system/getNetworkStandby")
        mock_http.get(url, payload=system_responses["getNetworkStandby"])

        response = await connection.get(
            "system/getNetworkStandby", result_key="network_standby"
        )

        assert response == "auto"

    async def test_nonzero_response_code(self, mock_http, connection):
        body = {"response_code": 4}
        mock_http.get(device_info_url, payload=body)

        with pytest.raises(ResponseCodeError) as exc_info:
            await connection.get("system/getDeviceInfo")

        assert exc_info.value.response == body
        assert exc_info.value.response_code == 4
        assert "Invalid Parameter" in str(exc_info.value)

    async def test_nonzero_response_code_ignores_result_key(self, mock_http, connection):
        body = {"response_code": 5, "network_standby": "auto"}
        url = build_url("system/getNetworkStandby")
        mock_http.get(url, payload=body)

        with pytest.raises(ResponseCodeError) as exc_info:
            await connection.get("system/getNetworkStandby", result_key="network_standby")

        assert exc_info.value.response == body

    async def test_missing_response_code(self, mock_http, connection):
        mock_http.get(device_info_url, payload={"model_name": "RX-V583"})

        with pytest.raises(ResponseCodeError) as exc_info:
            await connection.get("system/getDeviceInfo")

        assert exc_info.value.response_code is None

    async def test_timeout(self, mock_http, connection):
        error = asyncio.TimeoutError()
        mock_http.get(device_info_url, exception=error)

        with pytest.raises(TransportError) as exc_info:
            await connection.get("system/getDeviceInfo")

        assert exc_info.value.error is error
        assert exc_info.value.__cause__ is error

    async def test_connection_refused(self, mock_http, connection):
        error = aiohttp.ClientConnectionError("Connection refused")
        mock_http.get(device_info_url, exception=error)

        with pytest.raises(TransportError) as exc_info:
            await connection.get("system/getDeviceInfo")

        assert exc_info.value.error is error

    async def test_http_error_status(self, mock_http, connection):
        mock_http.get(device_info_url, status=500, body="Internal Server Error")

        with pytest.raises(TransportError) as exc_info:
            await connection.get("system/getDeviceInfo")

        assert isinstance(exc_info.value.error, aiohttp.ClientResponseError)

    async def test_invalid_json_body(self, mock_http, connection):
        mock_http.get(device_info_url, body="<html></html>")

        with pytest.raises(MessageFormatError):
            await connection.get("system/getDeviceInfo")

    async def test_body_not_an_object(self, mock_http, connection):
        mock_http.get(device_info_url, payload=[0])

        with pytest.raises(MessageFormatError):
            await connection.get("system/getDeviceInfo")


class TestMsgBus:
    async def test_emit_to_subscriber(self):
        bus = MsgBus()
        subscriber, future = event_collector()
        bus.add_subscriber(subscriber, "listening")

        bus.emit_event("listening", ListeningEvent("127.0.0.1", 50001))

        message = await asyncio.wait_for(future, 1)
        assert message == {
            "event_name": "listening",
            "event": ListeningEvent("127.0.0.1", 50001),
        }

    async def test_remove_subscriber(self):
        bus = MsgBus()
        subscriber, future = event_collector()
        bus.add_subscriber(subscriber, "listening")
        bus.remove_subscriber(subscriber, "listening")

        bus.emit_event("listening", ListeningEvent("127.0.0.1", 50001))
        await asyncio.sleep(0.05)

        assert "listening" not in bus.subscribers
        assert not future.done()
