"""Board configurations and the advanced provisioning options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Pin = Union[int, str]


@dataclass(frozen=True)
class BoardSettings:
    """Pins and timing options for one board."""

    button_pin: Pin | None = 0
    button_active_low: bool = True
    led_pin: Pin | None = None
    led_pin_r: Pin | None = None
    led_pin_g: Pin | None = None
    led_pin_b: Pin | None = None
    led_pin_ws2812: Pin | None = None
    led_inverse: bool = False
    led_brightness: int = 255

    button_hold_time_indication: int = 3000
    button_hold_time_action: int = 10000
    button_press_time_action: int = 50
    pwm_max: int = 1023

    device_prefix: str = "Blynk"
    ap_url: str = "blynk.setup"
    default_server: str = "blynk.cloud"
    default_port: int = 443

    cloud_max_retries: int = 500
    net_connect_timeout: int = 50000
    cloud_connect_timeout: int = 50000
    ap_ip: str = "192.168.4.1"
    ap_subnet: str = "255.255.255.0"

    @property
    def led_is_rgb(self) -> bool:
        return self.led_pin_ws2812 is not None or self.led_pin_r is not None


_NODE_MCU = BoardSettings(
    button_pin=0, button_active_low=True, led_pin=2, led_inverse=True, led_brightness=255
)

_BOARDS: dict[str, BoardSettings] = {
    "node_mcu": _NODE_MCU,
    "wemos_d1_mini": _NODE_MCU,
    "sparkfun_blynk_board": BoardSettings(
        button_pin=0, button_active_low=True, led_pin_ws2812=4, led_brightness=64
    ),
    "witty_cloud_board": BoardSettings(
        button_pin=4,
        button_active_low=True,
        led_pin_r=15,
        led_pin_g=12,
        led_pin_b=13,
        led_inverse=False,
        led_brightness=64,
    ),
    "wio_terminal": BoardSettings(
        button_pin="WIO_KEY_A",
        button_active_low=True,
        led_pin="LED_BUILTIN",
        led_inverse=False,
        led_brightness=255,
    ),
    "custom": BoardSettings(
        button_pin=0, button_active_low=True, led_inverse=False, led_brightness=64
    ),
}


def board_settings(name: str = "custom") -> BoardSettings:
    """Settings for a named board; raises KeyError for an unknown board."""
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return _BOARDS[key]
    except KeyError:
        raise KeyError(f"unknown board: {name}") from None