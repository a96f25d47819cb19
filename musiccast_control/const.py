from typing import Final

DEFAULT_EVENT_PORT: Final = 50001
APP_NAME: Final = "ERDesigns/1.0"

HEADER_APP_NAME: Final = "X-AppName"
HEADER_APP_PORT: Final = "X-AppPort"

RESPONSE_CODE: Final = "response_code"
RESPONSE_CODE_OK: Final = 0

EVENT_MESSAGE: Final = "message"
EVENT_ERROR: Final = "error"
EVENT_LISTENING: Final = "listening"
EVENT_DECODE_ERROR: Final = "decode_error"

SUBSYSTEM_SYSTEM: Final = "system"
SUBSYSTEM_TUNER: Final = "tuner"
SUBSYSTEM_NETUSB: Final = "netusb"
SUBSYSTEM_CD: Final = "cd"
SUBSYSTEM_CLOCK: Final = "clock"

METHOD_GET: Final = "GET"
METHOD_POST: Final = "POST"

RESULT_MAC_ADDRESS_FILTER: Final = "mac_address_filter"
RESULT_NETWORK_STANDBY: Final = "network_standby"
RESULT_BLUETOOTH_INFO: Final = "bluetooth_info"
RESULT_BLUETOOTH_STANDBY: Final = "bluetooth_standby"
RESULT_BLUETOOTH_TX_SETTING: Final = "bluetooth_tx_setting"
