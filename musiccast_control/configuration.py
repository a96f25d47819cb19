from __future__ import annotations

from typing import Any

from musiccast_control.const import APP_NAME

TIMEOUT_REQUEST = 15.0  # Number of seconds before an HTTP request times out

config: dict[str, Any] = {
    "comms": {
        "transport": {
            "scheme": "http",
            "port": 80,
            "api_path": "/YamahaExtendedControl/v1",
            "timeout": TIMEOUT_REQUEST,
        },
        "headers": {"app_name": APP_NAME},
    },
    "receiver": {"host": "0.0.0.0", "encoding": "utf-8"},
    "system": {"network_name_max_length": 32, "mac_address_filter_max": 10},
}
