from __future__ import annotations

from typing import Optional

import aiohttp
from typeguard import install_import_hook

from musiccast_control.const import DEFAULT_EVENT_PORT
from musiccast_control.extended_control import MusicCast

install_import_hook("musiccast_control")


async def get_musiccast(
    ip: str,
    event_port: int = DEFAULT_EVENT_PORT,
    host: Optional[str] = None,
    timeout: Optional[float] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> MusicCast:

    musiccast = MusicCast(
        ip=ip,
        event_port=event_port,
        host=host,
        timeout=timeout,
        session=session,
    )
    await musiccast.connect()
    return musiccast
