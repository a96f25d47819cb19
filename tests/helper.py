import asyncio
import socket
from urllib.parse import urlencode

from aioresponses.core import normalize_url

from tests.const import BASE_URL, LOCALHOST


def build_url(path, base_url=BASE_URL, **params):
    """Return the request URL the client is expected to build for path."""

    url = f"{base_url}/{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def find_requests(mock, method, url):
    """Return the calls aioresponses recorded for method and url."""

    return mock.requests.get((method, normalize_url(url)), [])


def event_collector():
    """Return a subscriber coroutine and a future resolved with its first message."""

    future = asyncio.get_running_loop().create_future()

    async def subscriber(message):
        if not future.done():
            future.set_result(message)

    return subscriber, future


def send_datagram(port, data, host=LOCALHOST):
    """Send one datagram to host:port and return the sender port used."""

    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind((host, 0))
        sock.sendto(data, (host, port))
        return sock.getsockname()[1]
