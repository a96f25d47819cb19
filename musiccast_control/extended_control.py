from __future__ import annotations

from collections.abc import Coroutine
import logging
from typing import Any, Callable, Optional

import aiohttp
import icontract

from musiccast_control.configuration import config
from musiccast_control.connection import AsyncConnection, MsgBus
from musiccast_control.const import (
    DEFAULT_EVENT_PORT,
    RESULT_BLUETOOTH_INFO,
    RESULT_BLUETOOTH_STANDBY,
    RESULT_BLUETOOTH_TX_SETTING,
    RESULT_MAC_ADDRESS_FILTER,
    RESULT_NETWORK_STANDBY,
    SUBSYSTEM_CD,
    SUBSYSTEM_CLOCK,
    SUBSYSTEM_NETUSB,
    SUBSYSTEM_SYSTEM,
    SUBSYSTEM_TUNER,
)
from musiccast_control.event_receiver import EventReceiver, SocketState
from musiccast_control.musiccast_typing import EventName, ZoneId

_LOGGER = logging.getLogger(__name__)

NETWORK_NAME_MAX_LENGTH: int = config["system"]["network_name_max_length"]
MAC_ADDRESS_FILTER_MAX: int = config["system"]["mac_address_filter_max"]

DEFAULT_ALARM_DETAIL: dict[str, Any] = {
    "day": "oneday",
    "enable": False,
    "time": "0000",
    "beep": False,
    "playback_type": "resume",
    "resume": {"input": "none"},
    "preset": {"type": "none", "num": 1},
}


class _Subsystem:
    """Thin wrapper translating method calls into requests below one base path."""

    PATH = ""

    def __init__(self, connection: AsyncConnection) -> None:
        self._connection = connection

    def _path(self, command: str) -> str:
        return _format_path(self.PATH, command)

    async def _get(
        self,
        command: str,
        params: Optional[dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> Any:
        return await self._connection.get(self._path(command), params, result_key)

    async def _post(
        self,
        command: str,
        data: Optional[dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> Any:
        return await self._connection.post(self._path(command), data, result_key)


class System(_Subsystem):
    PATH = SUBSYSTEM_SYSTEM

    """
    Device and Network Commands
    """

    async def get_device_info(self) -> dict[str, Any]:
        return await self._get("getDeviceInfo")

    async def get_features(self) -> dict[str, Any]:
        return await self._get("getFeatures")

    async def get_network_status(self) -> dict[str, Any]:
        return await self._get("getNetworkStatus")

    async def set_wired_lan(
        self,
        dhcp: bool = False,
        ip_address: str = "",
        subnet_mask: str = "",
        default_gateway: str = "",
        dns_server_1: str = "",
        dns_server_2: str = "",
    ) -> dict[str, Any]:
        return await self._post(
            "setWiredLan",
            _format_ip_settings(
                dhcp, ip_address, subnet_mask, default_gateway, dns_server_1, dns_server_2
            ),
        )

    async def set_wireless_lan(
        self,
        ssid: str = "",
        type: str = "mixed_mode",
        key: str = "",
        dhcp: bool = False,
        ip_address: str = "",
        subnet_mask: str = "",
        default_gateway: str = "",
        dns_server_1: str = "",
        dns_server_2: str = "",
    ) -> dict[str, Any]:
        data = {"ssid": ssid, "type": type, "key": key}
        data.update(
            _format_ip_settings(
                dhcp, ip_address, subnet_mask, default_gateway, dns_server_1, dns_server_2
            )
        )
        return await self._post("setWirelessLan", data)

    async def set_ip_settings(
        self,
        dhcp: bool = False,
        ip_address: str = "",
        subnet_mask: str = "",
        default_gateway: str = "",
        dns_server_1: str = "",
        dns_server_2: str = "",
    ) -> dict[str, Any]:
        return await self._post(
            "setIpSettings",
            _format_ip_settings(
                dhcp, ip_address, subnet_mask, default_gateway, dns_server_1, dns_server_2
            ),
        )

    @icontract.require(lambda name: len(name) <= NETWORK_NAME_MAX_LENGTH)
    async def set_network_name(self, name: str) -> dict[str, Any]:
        return await self._post("setNetworkName", {"name": name})

    async def set_airplay_pin(self, pin: str) -> dict[str, Any]:
        return await self._post("setAirPlayPin", {"pin": pin})

    async def get_mac_address_filter(self) -> Any:
        return await self._get(
            "getMacAddressFilter", result_key=RESULT_MAC_ADDRESS_FILTER
        )

    @icontract.require(
        lambda addresses: addresses is None or len(addresses) <= MAC_ADDRESS_FILTER_MAX
    )
    async def set_mac_address_filter(
        self, filter: bool = False, addresses: Optional[list[str]] = None
    ) -> Any:
        """Up to ten addresses, sent as address_1 ... address_10."""

        return await self._post(
            "setMacAddressFilter",
            _format_mac_address_filter(filter, addresses or []),
            result_key=RESULT_MAC_ADDRESS_FILTER,
        )

    async def get_network_standby(self) -> Any:
        return await self._get("getNetworkStandby", result_key=RESULT_NETWORK_STANDBY)

    async def set_network_standby(self, standby: str = "auto") -> Any:
        return await self._get(
            "setNetworkStandby",
            {"standby": standby},
            result_key=RESULT_NETWORK_STANDBY,
        )

    """
    Bluetooth Commands
    """

    async def get_bluetooth_info(self) -> Any:
        return await self._get("getBluetoothInfo", result_key=RESULT_BLUETOOTH_INFO)

    async def set_bluetooth_standby(self, standby: bool = True) -> Any:
        return await self._get(
            "setBluetoothStandby",
            {"standby": standby},
            result_key=RESULT_BLUETOOTH_STANDBY,
        )

    async def set_bluetooth_tx_setting(self, enable: bool = True) -> Any:
        return await self._get(
            "setBluetoothTxSetting",
            {"enable": enable},
            result_key=RESULT_BLUETOOTH_TX_SETTING,
        )

    async def get_bluetooth_device_list(self) -> dict[str, Any]:
        return await self._get("getBluetoothDeviceList")

    async def update_bluetooth_device_list(self) -> dict[str, Any]:
        return await self._get("updateBluetoothDeviceList")

    async def connect_bluetooth_device(self, address: str = "") -> dict[str, Any]:
        return await self._get("connectBluetoothDevice", {"address": address})

    async def disconnect_bluetooth_device(self) -> dict[str, Any]:
        return await self._get("disconnectBluetoothDevice")

    """
    Function Commands
    """

    async def get_func_status(self) -> dict[str, Any]:
        return await self._get("getFuncStatus")

    async def set_auto_power_standby(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setAutoPowerStandby", {"enable": enable})

    async def set_ir_sensor(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setIrSensor", {"enable": enable})

    async def set_speaker_a(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setSpeakerA", {"enable": enable})

    async def set_speaker_b(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setSpeakerB", {"enable": enable})

    async def set_dimmer(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setDimmer", {"enable": enable})

    async def set_zone_b_volume_sync(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setZoneBVolumeSync", {"enable": enable})

    async def set_hdmi_out_1(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setHdmiOut1", {"enable": enable})

    async def set_hdmi_out_2(self, enable: bool = True) -> dict[str, Any]:
        return await self._get("setHdmiOut2", {"enable": enable})

    """
    Name Text, Location and IR Commands
    """

    async def get_name_text(self, id: str = "") -> dict[str, Any]:
        return await self._get("getNameText", {"id": id})

    async def set_name_text(self, id: str, text: str) -> dict[str, Any]:
        return await self._post("setNameText", {"id": id, "text": text})

    async def get_location_info(self) -> dict[str, Any]:
        return await self._get("getLocationInfo")

    async def send_ir_code(self, code: str) -> dict[str, Any]:
        return await self._get("sendIrCode", {"code": code})


class Zone(_Subsystem):
    """
    Zone Commands

    Zone ids are path segments of each request ("main", "zone2", ...), so this
    client has no base path of its own.
    """

    async def get_status(self, zone: ZoneId) -> dict[str, Any]:
        return await self._get(_format_path(zone, "getStatus"))

    async def get_sound_program_list(self, zone: ZoneId) -> dict[str, Any]:
        return await self._get(_format_path(zone, "getSoundProgramList"))

    async def set_power(self, zone: ZoneId, power: str = "on") -> dict[str, Any]:
        return await self._get(_format_path(zone, "setPower"), {"power": power})

    async def set_sleep(self, zone: ZoneId, sleep: int = 0) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setSleep"), {"sleep": sleep})

    async def set_volume(
        self, zone: ZoneId, volume: Any, step: int = 1
    ) -> dict[str, Any]:
        """volume is a level, or "up"/"down" moving by step."""

        return await self._get(
            _format_path(zone, "setVolume"), {"volume": volume, "step": step}
        )

    async def set_mute(self, zone: ZoneId, enable: bool = True) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setMute"), {"enable": enable})

    async def set_input(
        self, zone: ZoneId, input: str, mode: str = "autoplay_disabled"
    ) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setInput"), {"input": input, "mode": mode}
        )

    async def set_sound_program(self, zone: ZoneId, program: str) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setSoundProgram"), {"program": program}
        )

    async def set_3d_surround(
        self, zone: ZoneId, enable: bool = False
    ) -> dict[str, Any]:
        return await self._get(_format_path(zone, "set3dSurround"), {"enable": enable})

    async def set_direct(self, zone: ZoneId, enable: bool = False) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setDirect"), {"enable": enable})

    async def set_pure_direct(
        self, zone: ZoneId, enable: bool = False
    ) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setPureDirect"), {"enable": enable})

    async def set_enhancer(self, zone: ZoneId, enable: bool = True) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setEnhancer"), {"enable": enable})

    async def set_tone_control(
        self, zone: ZoneId, mode: str, bass: int, treble: int
    ) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setToneControl"),
            {"mode": mode, "bass": bass, "treble": treble},
        )

    async def set_equalizer(
        self, zone: ZoneId, mode: str, low: int, mid: int, high: int
    ) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setEqualizer"),
            {"mode": mode, "low": low, "mid": mid, "high": high},
        )

    async def set_balance(self, zone: ZoneId, value: int) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setBalance"), {"value": value})

    async def set_dialogue_level(self, zone: ZoneId, value: int) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setDialogueLevel"), {"value": value}
        )

    async def set_dialogue_lift(self, zone: ZoneId, value: int) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setDialogueLift"), {"value": value})

    async def set_clear_voice(self, zone: ZoneId, enable: bool) -> dict[str, Any]:
        return await self._get(_format_path(zone, "setClearVoice"), {"enable": enable})

    async def set_subwoofer_volume(self, zone: ZoneId, volume: int) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setSubwooferVolume"), {"volume": volume}
        )

    async def set_bass_extension(self, zone: ZoneId, enable: bool) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "setBassExtension"), {"enable": enable}
        )

    async def get_signal_info(self, zone: ZoneId) -> dict[str, Any]:
        return await self._get(_format_path(zone, "getSignalInfo"))

    async def prepare_input_change(self, zone: ZoneId, input: str) -> dict[str, Any]:
        return await self._get(
            _format_path(zone, "prepareInputChange"), {"input": input}
        )


class Tuner(_Subsystem):
    PATH = SUBSYSTEM_TUNER

    async def get_preset_info(self, band: str = "fm") -> dict[str, Any]:
        return await self._get("getPresetInfo", {"band": band})

    async def get_play_info(self) -> dict[str, Any]:
        return await self._get("getPlayInfo")

    async def set_band(self, band: str = "fm") -> dict[str, Any]:
        return await self._get("setBand", {"band": band})

    async def set_freq(
        self, band: str, tuning: str, num: Optional[int] = None
    ) -> dict[str, Any]:
        """num is the frequency, only used with tuning "direct"."""

        return await self._get(
            "setFreq", {"band": band, "tuning": tuning, "num": num}
        )

    async def recall_preset(self, zone: ZoneId, band: str, num: int) -> dict[str, Any]:
        return await self._get(
            "recallPreset", {"zone": zone, "band": band, "num": num}
        )

    async def switch_preset(self, direction: str) -> dict[str, Any]:
        return await self._get("switchPreset", {"dir": direction})

    async def store_preset(self, num: int) -> dict[str, Any]:
        return await self._get("storePreset", {"num": num})

    async def clear_preset(self, band: str, num: int) -> dict[str, Any]:
        return await self._get("clearPreset", {"band": band, "num": num})

    async def start_auto_preset(self, band: str) -> dict[str, Any]:
        return await self._get("startAutoPreset", {"band": band})

    async def cancel_auto_preset(self, band: str = "fm") -> dict[str, Any]:
        return await self._get("cancelAutoPreset", {"band": band})

    async def move_preset(self, band: str, from_: int, to: int) -> dict[str, Any]:
        return await self._get("movePreset", {"band": band, "from": from_, "to": to})

    """
    DAB Commands
    """

    async def start_dab_initial_scan(self) -> dict[str, Any]:
        return await self._get("startDabInitialScan")

    async def cancel_dab_initial_scan(self) -> dict[str, Any]:
        return await self._get("cancelDabInitialScan")

    async def set_dab_tune_aid(self, action: str) -> dict[str, Any]:
        return await self._get("setDabTuneAid", {"action": action})

    async def set_dab_service(self, direction: str = "up") -> dict[str, Any]:
        return await self._get("setDabService", {"dir": direction})


class NetUSB(_Subsystem):
    PATH = SUBSYSTEM_NETUSB

    """
    Playback Commands
    """

    async def get_preset_info(self) -> dict[str, Any]:
        return await self._get("getPresetInfo")

    async def get_play_info(self) -> dict[str, Any]:
        return await self._get("getPlayInfo")

    async def set_playback(self, playback: str) -> dict[str, Any]:
        return await self._get("setPlayback", {"playback": playback})

    async def set_play_position(self, position: int) -> dict[str, Any]:
        return await self._get("setPlayPosition", {"position": position})

    async def toggle_repeat(self) -> dict[str, Any]:
        return await self._get("toggleRepeat")

    async def toggle_shuffle(self) -> dict[str, Any]:
        return await self._get("toggleShuffle")

    """
    List Commands
    """

    async def get_list_info(
        self,
        list_id: str,
        input: str,
        index: Optional[int] = None,
        size: Optional[int] = None,
        lang: Optional[str] = None,
    ) -> dict[str, Any]:
        return await self._get(
            "getListInfo",
            {"list_id": list_id, "input": input, "index": index, "size": size, "lang": lang},
        )

    async def set_list_control(
        self,
        list_id: str,
        type: str,
        index: Optional[int] = None,
        zone: Optional[ZoneId] = None,
    ) -> dict[str, Any]:
        return await self._get(
            "setListControl",
            {"list_id": list_id, "type": type, "index": index, "zone": zone},
        )

    async def set_search_string(
        self, list_id: str, string: str, index: Optional[int] = None
    ) -> dict[str, Any]:
        return await self._get(
            "setSearchString", {"list_id": list_id, "string": string, "index": index}
        )

    async def set_list_sort_option(
        self, input: str = "pandora", type: str = "date"
    ) -> dict[str, Any]:
        return await self._get("setListSortOption", {"input": input, "type": type})

    async def manage_list(
        self,
        list_id: str,
        type: str,
        index: Optional[int] = None,
        zone: Optional[ZoneId] = None,
        timeout: int = 5000,
    ) -> dict[str, Any]:
        """timeout is the device side processing limit in ms, 0 means its maximum."""

        return await self._get(
            "manageList",
            {
                "list_id": list_id,
                "type": type,
                "index": index,
                "zone": zone,
                "timeout": timeout,
            },
        )

    """
    Preset and Recent Commands
    """

    async def recall_preset(self, zone: ZoneId, num: int) -> dict[str, Any]:
        return await self._get("recallPreset", {"zone": zone, "num": num})

    async def store_preset(self, num: int) -> dict[str, Any]:
        return await self._get("storePreset", {"num": num})

    async def clear_preset(self, num: int) -> dict[str, Any]:
        return await self._get("clearPreset", {"num": num})

    async def move_preset(self, from_: int, to: int) -> dict[str, Any]:
        return await self._get("movePreset", {"from": from_, "to": to})

    async def get_recent_info(self) -> dict[str, Any]:
        return await self._get("getRecentInfo")

    async def recall_recent_item(self, zone: ZoneId, num: int) -> dict[str, Any]:
        return await self._get("recallRecentItem", {"zone": zone, "num": num})

    async def clear_recent_info(self) -> dict[str, Any]:
        return await self._get("clearRecentInfo")

    """
    Streaming Service Commands
    """

    async def get_settings(self) -> dict[str, Any]:
        return await self._get("getSettings")

    async def set_quality(self, input: str = "qobuz", value: str = "") -> dict[str, Any]:
        return await self._get("setQuality", {"input": input, "value": value})

    async def manage_play(self, type: str, timeout: int = 5000) -> dict[str, Any]:
        return await self._get("managePlay", {"type": type, "timeout": timeout})

    async def get_play_description(
        self, type: str = "why_this_song", timeout: int = 5000
    ) -> dict[str, Any]:
        return await self._get("getPlayDescription", {"type": type, "timeout": timeout})

    async def get_account_status(self) -> dict[str, Any]:
        return await self._get("getAccountStatus")

    async def switch_account(
        self, input: str, index: int, timeout: int = 5000
    ) -> dict[str, Any]:
        return await self._get(
            "switchAccount", {"input": input, "index": index, "timeout": timeout}
        )

    async def get_service_info(
        self, input: str, type: str, timeout: int = 5000
    ) -> dict[str, Any]:
        return await self._get(
            "getServiceInfo", {"input": input, "type": type, "timeout": timeout}
        )


class CD(_Subsystem):
    PATH = SUBSYSTEM_CD

    async def get_play_info(self) -> dict[str, Any]:
        return await self._get("getPlayInfo")

    async def set_playback(
        self, playback: str, num: Optional[int] = None
    ) -> dict[str, Any]:
        """num is the track number, only used with playback "track_select"."""

        return await self._get("setPlayback", {"playback": playback, "num": num})

    async def toggle_tray(self) -> dict[str, Any]:
        return await self._get("toggleTray")

    async def toggle_repeat(self) -> dict[str, Any]:
        return await self._get("toggleRepeat")

    async def toggle_shuffle(self) -> dict[str, Any]:
        return await self._get("toggleShuffle")


class Clock(_Subsystem):
    PATH = SUBSYSTEM_CLOCK

    async def get_settings(self) -> dict[str, Any]:
        return await self._get("getSettings")

    async def set_auto_sync(self, enable: bool) -> dict[str, Any]:
        return await self._get("setAutoSync", {"enable": enable})

    async def set_date_and_time(self, date_time: str) -> dict[str, Any]:
        """date_time format is YYMMDDhhmmss."""

        return await self._get("setDateAndTime", {"date_time": date_time})

    async def set_clock_format(self, format: str = "24h") -> dict[str, Any]:
        return await self._get("setClockFormat", {"format": format})

    async def set_alarm_settings(
        self,
        alarm_on: bool,
        volume: int,
        fade_interval: int,
        fade_type: int,
        mode: str,
        repeat: bool,
        detail: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._post(
            "setAlarmSettings",
            {
                "alarm_on": alarm_on,
                "volume": volume,
                "fade_interval": fade_interval,
                "fade_type": fade_type,
                "mode": mode,
                "repeat": repeat,
                "detail": detail if detail is not None else dict(DEFAULT_ALARM_DETAIL),
            },
        )


class MusicCast:
    """One MusicCast device: its six subsystem clients and the event receiver.

    All clients share one AsyncConnection. Events from the receiver are emitted
    on this object's bus, subscribe with add_subscriber(coro, event_name).
    """

    def __init__(
        self,
        ip: str,
        event_port: int = DEFAULT_EVENT_PORT,
        host: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._timeout = timeout
        self._session = session
        self._bus = MsgBus()
        self._receiver = EventReceiver(self._bus, host)
        self._setup(ip, event_port)

    def _setup(self, ip: str, event_port: int) -> None:
        connection = AsyncConnection(ip, event_port, self._timeout, self._session)
        self._ip = ip
        self._event_port = event_port
        self._connection = connection
        self._system = System(connection)
        self._zone = Zone(connection)
        self._tuner = Tuner(connection)
        self._netusb = NetUSB(connection)
        self._cd = CD(connection)
        self._clock = Clock(connection)

    async def connect(self) -> None:
        _LOGGER.info(
            'Setting up MusicCast device "%s", event port %s', self._ip, self._event_port
        )
        await self._receiver.bind(self._event_port)

    async def disconnect(self) -> None:
        _LOGGER.debug("Requesting disconnect")
        self._receiver.close()
        await self._connection.close()
        _LOGGER.debug("Disconnect completed")

    async def reconfigure(
        self, ip: Optional[str] = None, event_port: Optional[int] = None
    ) -> None:
        """Point every client at a new address and/or event port.

        A bound receiver is rebound first when the port changes, a failed bind
        leaves the previous clients in place.
        """

        new_ip = self._ip if ip is None else ip
        new_port = self._event_port if event_port is None else event_port

        if new_port != self._event_port and self._receiver.state is SocketState.BOUND:
            await self._receiver.bind(new_port)

        old_connection = self._connection
        self._setup(new_ip, new_port)
        await old_connection.close()

    def add_subscriber(
        self, coro: Callable[..., Coroutine], event_name: EventName
    ) -> None:
        self._bus.add_subscriber(coro, event_name)

    def remove_subscriber(
        self, coro: Callable[..., Coroutine], event_name: EventName
    ) -> None:
        self._bus.remove_subscriber(coro, event_name)

    @property
    def ip(self) -> str:
        return self._ip

    @property
    def event_port(self) -> int:
        return self._event_port

    @property
    def connection(self) -> AsyncConnection:
        return self._connection

    @property
    def receiver(self) -> EventReceiver:
        return self._receiver

    @property
    def system(self) -> System:
        return self._system

    @property
    def zone(self) -> Zone:
        return self._zone

    @property
    def tuner(self) -> Tuner:
        return self._tuner

    @property
    def netusb(self) -> NetUSB:
        return self._netusb

    @property
    def cd(self) -> CD:
        return self._cd

    @property
    def clock(self) -> Clock:
        return self._clock


"""
Request Formats
"""


def _format_path(base: str, command: str) -> str:
    if not base:
        return command
    return "{}/{}".format(base, command)


def _format_ip_settings(
    dhcp: bool,
    ip_address: str,
    subnet_mask: str,
    default_gateway: str,
    dns_server_1: str,
    dns_server_2: str,
) -> dict[str, Any]:
    return {
        "dhcp": dhcp,
        "ip_address": ip_address,
        "subnet_mask": subnet_mask,
        "default_gateway": default_gateway,
        "dns_server_1": dns_server_1,
        "dns_server_2": dns_server_2,
    }


def _format_mac_address_filter(filter: bool, addresses: list[str]) -> dict[str, Any]:
    data: dict[str, Any] = {"filter": filter}
    for num in range(1, 11):
        data["address_{}".format(num)] = (
            addresses[num - 1] if num <= len(addresses) else ""
        )
    return data
