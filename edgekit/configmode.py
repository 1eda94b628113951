"""Provisioning helpers: device naming, Wi-Fi reporting and applying a submitted configuration."""

from __future__ import annotations

import dataclasses
import ipaddress
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Mapping, Sequence

from .configstore import ConfigFlag, ConfigStore
from .param import ParamItem

log = logging.getLogger(__name__)

UNIQUE_ALPHABET = "0W8N4Y1HP5DF9K6JM3C2UA7R"
DEFAULT_PREFIX = "Blynk"
MAX_NAME_LENGTH = 31
MAX_SCAN_RESULTS = 15
_MAX_UNIQUE_LENGTH = 15
_BOARD_INFO_LIMIT = 511
_SCAN_ENTRY_LIMIT = 255

# Form field names for the network name, its manual override and its passphrase.
_WIFI_FIELDS = ("ssid", "ssidManual", "pass")

RESPONSE_SAVED = '{"status":"ok","msg":"Configuration saved"}'
RESPONSE_CONNECTING = '{"status":"ok","msg":"Trying to connect..."}'
RESPONSE_INVALID = '{"status":"error","msg":"Configuration invalid"}'


def encode_unique_part(number: int, length: int) -> str:
    """Encode a 32-bit number as ``length`` characters with no letter repeated twice in a row."""
    if not 0 <= length <= _MAX_UNIQUE_LENGTH:
        raise ValueError(f"length must be between 0 and {_MAX_UNIQUE_LENGTH}")
    base = len(UNIQUE_ALPHABET)
    n = number & 0xFFFFFFFF
    chars: list[str] = []
    prev = ""
    for _ in range(length):
        c = UNIQUE_ALPHABET[n % base]
        if c == prev:
            c = UNIQUE_ALPHABET[((n + 1) & 0xFFFFFFFF) % base]
        chars.append(c)
        prev = c
        n //= base
    return "".join(chars)


def wifi_name(
    template_name: str,
    unique: int,
    prefix: str = DEFAULT_PREFIX,
    with_prefix: bool = True,
) -> str:
    """The device's hotspot name, built from the template name and a unique number."""
    dev_unique = encode_unique_part(unique, 4)
    keep = max(0, MAX_NAME_LENGTH - 6 - len(prefix))
    dev_name = template_name[:keep]
    if with_prefix:
        return f"{prefix} {dev_name}-{dev_unique}"
    return f"{dev_name}-{dev_unique}"


def hostname(name: str) -> str:
    """A network host name derived from a device name."""
    return name.replace(" ", "-")


def mac_to_string(mac: Sequence[int] | bytes) -> str:
    """Colon-separated lower-case hex form of a six-byte hardware address."""
    octets = bytes(mac)
    if len(octets) != 6:
        raise ValueError("a hardware address has six bytes")
    return ":".join(f"{octet:02x}" for octet in octets)


class WifiAuth(IntEnum):
    OPEN = 0
    WEP = 1
    WPA_PSK = 2
    WPA2_PSK = 3
    WPA_WPA2_PSK = 4
    WPA2_ENTERPRISE = 5
    WPA3_PSK = 6
    WPA2_WPA3_PSK = 7
    WAPI_PSK = 8


_AUTH_NAMES = {
    WifiAuth.OPEN: "OPEN",
    WifiAuth.WEP: "WEP",
    WifiAuth.WPA_PSK: "WPA",
    WifiAuth.WPA2_PSK: "WPA2",
    WifiAuth.WPA_WPA2_PSK: "WPA+WPA2",
    WifiAuth.WPA2_ENTERPRISE: "WPA2-EAP",
    WifiAuth.WPA3_PSK: "WPA3",
    WifiAuth.WPA2_WPA3_PSK: "WPA2+WPA3",
    WifiAuth.WAPI_PSK: "WAPI",
}


def wifi_sec_to_str(auth: int) -> str:
    """Short name of a Wi-Fi security mode; "unknown" for anything else."""
    try:
        return _AUTH_NAMES[WifiAuth(auth)]
    except ValueError:
        return "unknown"


@dataclass(frozen=True)
class Network:
    """One result of a Wi-Fi scan."""

    ssid: str
    bssid: str
    rssi: int
    auth: int
    channel: int


def _parse_ip(text: str) -> int | None:
    """An IPv4 address as the little-endian 32-bit value it is stored as."""
    try:
        return int.from_bytes(ipaddress.IPv4Address(text).packed, "little")
    except ValueError:
        return None


def apply_config(
    store: ConfigStore, args: Mapping[str, str], default: ConfigStore
) -> tuple[int, str, ConfigStore]:
    """Apply the fields of a submitted configuration form.

    Returns the HTTP status, the JSON body and the resulting configuration.
    A valid form yields a fresh configuration built on ``default``; an
    invalid one leaves ``store`` as it was. When the form asks to save,
    the result carries the VALID flag.
    """
    def arg(name: str) -> str:
        return args.get(name, "") or ""

    ssid_field, manual_field, phrase_field = _WIFI_FIELDS
    ssid = arg(ssid_field)
    ssid_manual = arg(manual_field)
    if ssid_manual:
        ssid = ssid_manual
    phrase = arg(phrase_field)
    token = arg("blynk")
    host = arg("host")
    port = arg("port_ssl")
    force_save = ParamItem(arg("save").encode("utf-8")).as_int() != 0

    log.debug("WiFi SSID: %s", ssid)
    log.debug("Blynk cloud: %s:%s", host, port)

    if len(token.encode("utf-8")) != 32 or not ssid:
        log.debug("Configuration invalid")
        return 500, RESPONSE_INVALID, store

    new = dataclasses.replace(default)
    new.wifi_ssid = ssid
    new.wifi_pass = phrase
    new.cloud_token = token
    if host:
        new.cloud_host = host
    if port:
        new.cloud_port = ParamItem(port.encode("utf-8")).as_int()

    static_ip = _parse_ip(arg("ip")) if arg("ip") else None
    if static_ip is not None:
        new.static_ip = static_ip
        new.set_flag(ConfigFlag.STATIC_IP, True)
    else:
        new.set_flag(ConfigFlag.STATIC_IP, False)
    for field, name in (
        ("static_mask", "mask"),
        ("static_gw", "gw"),
        ("static_dns", "dns"),
        ("static_dns2", "dns2"),
    ):
        value = _parse_ip(arg(name)) if arg(name) else None
        if value is not None:
            setattr(new, field, value)

    if force_save:
        new.set_flag(ConfigFlag.VALID, True)
        return 200, RESPONSE_SAVED, new
    return 200, RESPONSE_CONNECTING, new


def board_info_json(
    template_name: str,
    template_id: str | None,
    firmware_type: str,
    firmware_version: str,
    ssid: str,
    bssid: str,
    mac: str,
    last_error: int,
) -> str:
    """The board description sent to the provisioning app."""
    body = (
        f'{{"board":"{template_name}","tmpl_id":"{template_id or "Unknown"}",'
        f'"fw_type":"{firmware_type}","fw_ver":"{firmware_version}",'
        f'"ssid":"{ssid}","bssid":"{bssid}","mac":"{mac}",'
        f'"last_error":{int(last_error)},"wifi_scan":true,"static_ip":true}}'
    )
    return body[:_BOARD_INFO_LIMIT]


def wifi_scan_json(networks: Iterable[Network]) -> str:
    """The strongest networks, best first, as a JSON array."""
    ranked = sorted(networks, key=lambda net: net.rssi, reverse=True)[:MAX_SCAN_RESULTS]
    if not ranked:
        return "[]"
    entries = [
        (
            f'  {{"ssid":"{net.ssid}","bssid":"{net.bssid}","rssi":{int(net.rssi)},'
            f'"sec":"{wifi_sec_to_str(net.auth)}","ch":{int(net.channel)}}}'
        )[:_SCAN_ENTRY_LIMIT]
        for net in ranked
    ]
    return "[\n" + ",\n".join(entries) + "\n]"