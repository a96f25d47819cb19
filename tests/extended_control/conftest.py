import pytest

from musiccast_control import get_musiccast
from musiccast_control.connection import AsyncConnection, MsgBus
from musiccast_control.event_receiver import EventReceiver
from musiccast_control.extended_control import MusicCast

from tests.const import EVENT_PORT, HOST, LOCALHOST


@pytest.fixture
async def musiccast():
    """This fixture does NOT bind the event receiver."""

    _musiccast = MusicCast(HOST, EVENT_PORT)
    yield _musiccast
    await _musiccast.disconnect()


@pytest.fixture
async def bound_musiccast(unused_udp_port):
    """This fixture DOES bind the event receiver, on the loopback interface."""

    _musiccast = await get_musiccast(HOST, unused_udp_port, host=LOCALHOST)
    yield _musiccast
    await _musiccast.disconnect()


@pytest.fixture
async def connection():
    _connection = AsyncConnection(HOST, EVENT_PORT)
    yield _connection
    await _connection.close()


@pytest.fixture
async def receiver():
    _receiver = EventReceiver(MsgBus(), host=LOCALHOST)
    yield _receiver
    _receiver.close()
