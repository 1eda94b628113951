import ipaddress
import json

import pytest

from edgekit.configmode import (
    RESPONSE_CONNECTING,
    RESPONSE_INVALID,
    RESPONSE_SAVED,
    UNIQUE_ALPHABET,
    Network,
    WifiAuth,
    apply_config,
    board_info_json,
    encode_unique_part,
    hostname,
    mac_to_string,
    wifi_name,
    wifi_scan_json,
    wifi_sec_to_str,
)
from edgekit.configstore import ConfigFlag, ConfigStore

TOKEN_VALUE = ("token" * 7)[:32]


@pytest.mark.parametrize("number", [0, 1, 23, 24, 12345, 0xFFFFFFFF])
def test_unique_part_invariants(number):
    code = encode_unique_part(number, 6)
    assert len(code) == 6
    assert set(code) <= set(UNIQUE_ALPHABET)
    assert all(a != b for a, b in zip(code, code[1:]))


def test_unique_part_zero():
    assert encode_unique_part(0, 4) == "0W0W"


def test_unique_part_too_long():
    with pytest.raises(ValueError):
        encode_unique_part(5, 16)


def test_wifi_name_with_prefix():
    name = wifi_name("My Device", 777)
    assert name == "Blynk My Device-" + encode_unique_part(777, 4)


def test_wifi_name_without_prefix():
    name = wifi_name("My Device", 777, with_prefix=False)
    assert name == "My Device-" + encode_unique_part(777, 4)


def test_wifi_name_truncates_long_template():
    name = wifi_name("X" * 100, 42)
    assert len(name) <= 31
    assert name.startswith("Blynk X")


def test_hostname_replaces_spaces():
    assert hostname("Blynk My Device-0W0W") == "Blynk-My-Device-0W0W"


def test_mac_to_string():
    assert mac_to_string(bytes([0x02, 0, 0, 0, 0, 0x0A])) == "02:00:00:00:00:0a"


def test_mac_to_string_wrong_size():
    with pytest.raises(ValueError):
        mac_to_string([1, 2, 3])


def test_wifi_sec_names():
    assert wifi_sec_to_str(WifiAuth.WPA2_PSK) == "WPA2"
    assert wifi_sec_to_str(WifiAuth.WPA_WPA2_PSK) == "WPA+WPA2"
    assert wifi_sec_to_str(99) == "unknown"


def _form(**extra):
    form = {"ssid": "home", "pass": "password", "blynk": TOKEN_VALUE}
    form.update(extra)
    return form


def test_apply_config_connect():
    default = ConfigStore.default("1.0.0")
    current = ConfigStore.default("1.0.0")
    status, body, store = apply_config(current, _form(), default)
    assert status == 200
    assert body == RESPONSE_CONNECTING
    assert store.wifi_ssid == "home"
    assert store.wifi_pass == "password"
    assert store.cloud_token == TOKEN_VALUE
    assert store.cloud_host == default.cloud_host
    assert not store.get_flag(ConfigFlag.VALID)
    assert not store.get_flag(ConfigFlag.STATIC_IP)


def test_apply_config_save_sets_valid():
    default = ConfigStore.default()
    status, body, store = apply_config(default, _form(save="1"), default)
    assert status == 200
    assert body == RESPONSE_SAVED
    assert store.get_flag(ConfigFlag.VALID)
    assert not default.get_flag(ConfigFlag.VALID)


def test_apply_config_host_port_and_manual_ssid():
    default = ConfigStore.default()
    _, _, store = apply_config(
        default, _form(host="example.com", port_ssl="8443", ssidManual="other"), default
    )
    assert store.cloud_host == "example.com"
    assert store.cloud_port == 8443
    assert store.wifi_ssid == "other"


def test_apply_config_static_ip_round_trip():
    default = ConfigStore.default()
    _, _, store = apply_config(
        default, _form(ip="192.168.1.10", mask="255.255.255.0", gw="192.168.1.1"), default
    )
    assert store.get_flag(ConfigFlag.STATIC_IP)
    assert ipaddress.IPv4Address(store.static_ip.to_bytes(4, "little")) == ipaddress.IPv4Address("192.168.1.10")
    assert ipaddress.IPv4Address(store.static_mask.to_bytes(4, "little")) == ipaddress.IPv4Address("255.255.255.0")
    assert ipaddress.IPv4Address(store.static_gw.to_bytes(4, "little")) == ipaddress.IPv4Address("192.168.1.1")


def test_apply_config_bad_ip_clears_flag():
    default = ConfigStore.default()
    _, _, store = apply_config(default, _form(ip="300.1.1.1"), default)
    assert not store.get_flag(ConfigFlag.STATIC_IP)
    assert store.static_ip == default.static_ip


@pytest.mark.parametrize(
    "form",
    [
        {"ssid": "home", "blynk": "short"},
        {"ssid": "", "blynk": TOKEN_VALUE},
        {"blynk": TOKEN_VALUE},
    ],
)
def test_apply_config_invalid(form):
    current = ConfigStore.default()
    status, body, store = apply_config(current, form, ConfigStore.default())
    assert status == 500
    assert body == RESPONSE_INVALID
    assert store is current


def test_board_info_json():
    body = json.loads(
        board_info_json("Board", "TMPLabc", "TMPLabc", "1.0.0", "Blynk Board-0W0W",
                        "02:00:00:00:00:01", "02:00:00:00:00:02", 701)
    )
    assert body["board"] == "Board"
    assert body["tmpl_id"] == "TMPLabc"
    assert body["fw_ver"] == "1.0.0"
    assert body["last_error"] == 701
    assert body["wifi_scan"] is True
    assert body["static_ip"] is True


def test_board_info_json_unknown_template():
    body = json.loads(board_info_json("Board", None, "t", "1", "s", "b", "m", 0))
    assert body["tmpl_id"] == "Unknown"


def test_wifi_scan_json_empty():
    assert wifi_scan_json([]) == "[]"


def test_wifi_scan_json_sorted_and_limited():
    networks = [
        Network(f"net{i}", f"02:00:00:00:00:{i:02x}", -90 + i, WifiAuth.WPA2_PSK, 1 + i % 11)
        for i in range(20)
    ]
    result = json.loads(wifi_scan_json(networks))
    assert len(result) == 15
    rssis = [entry["rssi"] for entry in result]
    assert rssis == sorted(rssis, reverse=True)
    assert result[0]["ssid"] == "net19"
    assert result[0]["sec"] == "WPA2"
    assert result[0]["ch"] == networks[19].channel