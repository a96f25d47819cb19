import pytest

from musiccast_control.exceptions import ResponseCodeError

from tests.command_response import RESPONSE_OK, cd_responses
from tests.helper import build_url, find_requests


class TestCD:
    async def test_get_play_info(self, mock_http, musiccast):
        mock_http.get(build_url("cd/getPlayInfo"), payload=cd_responses["getPlayInfo"])
        response = await musiccast.cd.get_play_info()
        assert response["total_tracks"] == 12

    async def test_set_playback_track_select(self, mock_http, musiccast):
        url = build_url("cd/setPlayback", playback="track_select", num=5)
        mock_http.get(url, payload=RESPONSE_OK)
        await musiccast.cd.set_playback("track_select", 5)
        assert len(find_requests(mock_http, "GET", url)) == 1

    async def test_set_playback_without_track(self, mock_http, musiccast):
        url = build_url("cd/setPlayback", playback="stop")
        mock_http.get(url, payload=RESPONSE_OK)
        await musiccast.cd.set_playback("stop")
        assert len(find_requests(mock_http, "GET", url)) == 1

    async def test_toggle_tray_failure(self, mock_http, musiccast):
        mock_http.get(build_url("cd/toggleTray"), payload={"response_code": 5})
        with pytest.raises(ResponseCodeError) as exc_info:
            await musiccast.cd.toggle_tray()
        assert exc_info.value.response == {"response_code": 5}

    @pytest.mark.parametrize("method, command", [
        ("toggle_tray", "toggleTray"),
        ("toggle_repeat", "toggleRepeat"),
        ("toggle_shuffle", "toggleShuffle"),
    ])
    async def test_toggles(self, mock_http, musiccast, method, command):
        mock_http.get(build_url(f"cd/{command}"), payload=RESPONSE_OK)
        assert await getattr(musiccast.cd, method)() == RESPONSE_OK
